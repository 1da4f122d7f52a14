"""
L4 Execution — Extension archive codec.

Two independent layers:

    pack / unpack           directory tree  ↔  tar stream
    compress / decompress   tar stream      ↔  gzip bytes

Archives only ever hold regular files and directories, named relative
to the packed root, with their permission bits.
"""

from __future__ import annotations

import gzip
import io
import logging
import os
import stat
import tarfile
import zlib
from pathlib import Path
from typing import Iterator

from extdeps.core.errors import ArchiveError

logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"


# ── tar layer ───────────────────────────────────────────────────


def _walk(root: Path) -> Iterator[Path]:
    """Depth-first, name-sorted walk; symlinked directories are not descended."""
    for entry in sorted(root.iterdir(), key=lambda p: p.name):
        yield entry
        if entry.is_dir() and not entry.is_symlink():
            yield from _walk(entry)


def pack(directory: str | Path) -> bytes:
    """Pack every file and directory under ``directory`` into a tar stream.

    Raises:
        ArchiveError: If ``directory`` is not a readable directory.
    """
    root = Path(directory).resolve()
    if not root.is_dir():
        raise ArchiveError(f"Not a directory: {root}")

    buf = io.BytesIO()
    files = dirs = 0
    try:
        with tarfile.open(fileobj=buf, mode="w", format=tarfile.PAX_FORMAT) as tar:
            for path in _walk(root):
                st = path.stat()
                info = tarfile.TarInfo(name=path.relative_to(root).as_posix())
                info.mode = stat.S_IMODE(st.st_mode)
                info.mtime = int(st.st_mtime)
                if stat.S_ISREG(st.st_mode):
                    info.type = tarfile.REGTYPE
                    info.size = st.st_size
                    with path.open("rb") as fh:
                        tar.addfile(info, fh)
                    files += 1
                elif stat.S_ISDIR(st.st_mode):
                    info.type = tarfile.DIRTYPE
                    tar.addfile(info)
                    dirs += 1
    except OSError as e:
        raise ArchiveError(f"Cannot pack {root}: {e}") from e

    logger.debug("Packed %s: %d files, %d directories", root, files, dirs)
    return buf.getvalue()


def _safe_target(root: Path, name: str) -> Path:
    """Destination path for an entry; must stay inside ``root``."""
    if not name or os.path.isabs(name) or name.startswith(("/", "\\")):
        raise ArchiveError(f"Refusing archive entry with absolute or empty path: {name!r}")
    target = (root / name).resolve()
    if target != root and root not in target.parents:
        raise ArchiveError(f"Refusing archive entry outside {root}: {name!r}")
    return target


def unpack(data: bytes, destination: str | Path) -> list[str]:
    """Recreate an archived tree under ``destination``.

    Parents are created as needed, existing files are replaced, and
    permission bits are restored on every file and directory.
    Directory modes are applied last, deepest first.

    Returns:
        Entry names in archive order.

    Raises:
        ArchiveError: On a malformed stream, an entry that would land
            outside ``destination``, or an entry that is neither a file
            nor a directory.
    """
    root = Path(destination).resolve()
    names: list[str] = []
    dir_modes: list[tuple[Path, int]] = []

    try:
        root.mkdir(parents=True, exist_ok=True)
        with tarfile.open(fileobj=io.BytesIO(data), mode="r:") as tar:
            for member in tar:
                target = _safe_target(root, member.name)
                if member.isdir():
                    target.mkdir(parents=True, exist_ok=True)
                    dir_modes.append((target, member.mode))
                elif member.isfile():
                    target.parent.mkdir(parents=True, exist_ok=True)
                    source = tar.extractfile(member)
                    if source is None:
                        raise ArchiveError(f"Cannot read archive entry {member.name!r}")
                    if target.exists() or target.is_symlink():
                        target.unlink()
                    target.write_bytes(source.read())
                    os.chmod(target, member.mode)
                else:
                    raise ArchiveError(
                        f"Refusing archive entry {member.name!r}: only files and directories are supported"
                    )
                names.append(member.name)

            for path, mode in sorted(dir_modes, key=lambda item: len(item[0].parts), reverse=True):
                os.chmod(path, mode)
    except tarfile.TarError as e:
        raise ArchiveError(f"Malformed archive: {e}") from e
    except OSError as e:
        raise ArchiveError(f"Cannot unpack into {root}: {e}") from e

    logger.debug("Unpacked %d entries into %s", len(names), root)
    return names


# ── gzip layer ──────────────────────────────────────────────────


def compress(data: bytes) -> bytes:
    return gzip.compress(data)


def decompress(data: bytes) -> bytes:
    """Inflate gzip bytes.

    Input without the gzip signature is returned unchanged, so plain
    (uncompressed) tarballs are accepted too.

    Raises:
        ArchiveError: If the input has the signature but is corrupt.
    """
    if not data.startswith(GZIP_MAGIC):
        logger.debug("No gzip signature; passing %d bytes through", len(data))
        return data
    try:
        return gzip.decompress(data)
    except (OSError, EOFError, zlib.error) as e:
        raise ArchiveError(f"Corrupt gzip data: {e}") from e


# ── composed ────────────────────────────────────────────────────


def package_directory(directory: str | Path, output: str | Path) -> Path:
    """Write ``directory`` as a gzip-compressed tarball at ``output``."""
    output = Path(output)
    payload = compress(pack(directory))
    try:
        output.write_bytes(payload)
    except OSError as e:
        raise ArchiveError(f"Cannot write {output}: {e}") from e
    logger.info("Packaged %s as %s (%d bytes)", directory, output, len(payload))
    return output


def extract_archive(data: bytes, destination: str | Path) -> list[str]:
    """Decompress (if gzipped) and unpack into ``destination``."""
    return unpack(decompress(data), destination)
