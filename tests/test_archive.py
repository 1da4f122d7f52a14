"""
Tests for the archive codec — tar pack/unpack and the gzip layer.
"""

import io
import os
import tarfile
from pathlib import Path

import pytest

from extdeps.core.errors import ArchiveError
from extdeps.core.services.ext_install.execution.archive import (
    GZIP_MAGIC,
    compress,
    decompress,
    extract_archive,
    pack,
    package_directory,
    unpack,
)


def _snapshot(root: Path) -> dict[str, tuple[int, bytes | None]]:
    """Relative path → (mode bits, content or None for directories)."""
    result: dict[str, tuple[int, bytes | None]] = {}
    for path in sorted(root.rglob("*")):
        rel = path.relative_to(root).as_posix()
        mode = path.stat().st_mode & 0o7777
        result[rel] = (mode, path.read_bytes() if path.is_file() else None)
    return result


def _tar_with(*members: tuple[tarfile.TarInfo, bytes | None]) -> bytes:
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w", format=tarfile.PAX_FORMAT) as tar:
        for info, content in members:
            if content is not None:
                info.size = len(content)
                tar.addfile(info, io.BytesIO(content))
            else:
                tar.addfile(info)
    return buf.getvalue()


def _file_member(name: str, mode: int = 0o644) -> tarfile.TarInfo:
    info = tarfile.TarInfo(name=name)
    info.type = tarfile.REGTYPE
    info.mode = mode
    return info


# ── tar layer ───────────────────────────────────────────────────


class TestPackUnpack:
    def test_round_trip_preserves_content_and_modes(self, ext_tree, tmp_path):
        dest = tmp_path / "out"
        unpack(pack(ext_tree), dest)
        assert _snapshot(dest) == _snapshot(ext_tree)

    def test_entries_are_relative_and_sorted(self, ext_tree):
        with tarfile.open(fileobj=io.BytesIO(pack(ext_tree)), mode="r:") as tar:
            names = tar.getnames()
        assert names == [
            "empty",
            "gem.build_complete",
            "lib",
            "lib/helper.rb",
            "lib/nested",
            "lib/nested/data.bin",
            "pg_ext.so",
        ]

    def test_unpack_returns_names_in_archive_order(self, ext_tree, tmp_path):
        names = unpack(pack(ext_tree), tmp_path / "out")
        assert names[0] == "empty"
        assert names[-1] == "pg_ext.so"

    def test_empty_directory(self, tmp_path):
        src = tmp_path / "src"
        src.mkdir()
        assert unpack(pack(src), tmp_path / "out") == []
        assert (tmp_path / "out").is_dir()

    def test_symlinked_file_archived_as_regular_file(self, ext_tree, tmp_path):
        (ext_tree / "link.so").symlink_to(ext_tree / "pg_ext.so")
        with tarfile.open(fileobj=io.BytesIO(pack(ext_tree)), mode="r:") as tar:
            member = tar.getmember("link.so")
            assert member.isfile()
            assert tar.extractfile(member).read() == b"\x7fELF\x00\x01binary"

    def test_pack_non_directory(self, tmp_path):
        f = tmp_path / "file.txt"
        f.write_text("x")
        with pytest.raises(ArchiveError, match="Not a directory"):
            pack(f)
        with pytest.raises(ArchiveError):
            pack(tmp_path / "missing")

    def test_unpack_replaces_existing_files(self, ext_tree, tmp_path):
        dest = tmp_path / "out"
        dest.mkdir()
        (dest / "pg_ext.so").write_bytes(b"stale")
        unpack(pack(ext_tree), dest)
        assert (dest / "pg_ext.so").read_bytes() == b"\x7fELF\x00\x01binary"

    def test_unpack_merges_into_existing_tree(self, ext_tree, tmp_path):
        dest = tmp_path / "out"
        dest.mkdir()
        (dest / "keep.txt").write_text("mine")
        unpack(pack(ext_tree), dest)
        assert (dest / "keep.txt").read_text() == "mine"
        assert (dest / "lib" / "helper.rb").exists()

    def test_read_only_directory_still_populated(self, tmp_path):
        src = tmp_path / "src"
        (src / "ro").mkdir(parents=True)
        (src / "ro" / "inner.so").write_bytes(b"so")
        os.chmod(src / "ro", 0o555)

        dest = tmp_path / "out"
        unpack(pack(src), dest)
        assert (dest / "ro" / "inner.so").read_bytes() == b"so"
        assert (dest / "ro").stat().st_mode & 0o7777 == 0o555

        os.chmod(src / "ro", 0o755)
        os.chmod(dest / "ro", 0o755)

    def test_missing_parents_created(self, tmp_path):
        data = _tar_with((_file_member("a/b/c.txt"), b"deep"))
        unpack(data, tmp_path / "out")
        assert (tmp_path / "out" / "a" / "b" / "c.txt").read_bytes() == b"deep"


class TestUnpackRejects:
    def test_parent_traversal(self, tmp_path):
        data = _tar_with((_file_member("../evil.txt"), b"x"))
        with pytest.raises(ArchiveError, match="outside"):
            unpack(data, tmp_path / "out")
        assert not (tmp_path / "evil.txt").exists()

    def test_nested_traversal(self, tmp_path):
        data = _tar_with((_file_member("lib/../../evil.txt"), b"x"))
        with pytest.raises(ArchiveError):
            unpack(data, tmp_path / "out")

    def test_absolute_path(self, tmp_path):
        data = _tar_with((_file_member("/tmp/evil.txt"), b"x"))
        with pytest.raises(ArchiveError, match="absolute"):
            unpack(data, tmp_path / "out")

    def test_symlink_member(self, tmp_path):
        info = tarfile.TarInfo(name="link")
        info.type = tarfile.SYMTYPE
        info.linkname = "/etc/passwd"
        with pytest.raises(ArchiveError, match="only files and directories"):
            unpack(_tar_with((info, None)), tmp_path / "out")

    @pytest.mark.parametrize("data", [b"", b"not a tar stream" * 64])
    def test_malformed_stream(self, data, tmp_path):
        with pytest.raises(ArchiveError, match="Malformed"):
            unpack(data, tmp_path / "out")


# ── gzip layer ──────────────────────────────────────────────────


class TestGzip:
    @pytest.mark.parametrize("data", [b"", b"hello", os.urandom(4096)])
    def test_decompress_inverts_compress(self, data):
        assert decompress(compress(data)) == data

    def test_compress_writes_gzip_signature(self):
        assert compress(b"abc").startswith(GZIP_MAGIC)

    def test_plain_input_passes_through(self, ext_tree):
        tar = pack(ext_tree)
        assert decompress(tar) == tar
        assert decompress(b"") == b""

    def test_corrupt_gzip(self):
        with pytest.raises(ArchiveError, match="Corrupt"):
            decompress(GZIP_MAGIC + b"\x08\x00garbage-garbage-garbage")

    def test_truncated_gzip(self):
        blob = compress(b"x" * 1000)
        with pytest.raises(ArchiveError):
            decompress(blob[:-12])


# ── composed ────────────────────────────────────────────────────


class TestComposed:
    def test_package_and_extract(self, ext_tree, tmp_path):
        artifact = package_directory(ext_tree, tmp_path / "pg-1.5.4.tar.gz")
        assert artifact.read_bytes().startswith(GZIP_MAGIC)

        dest = tmp_path / "ext"
        names = extract_archive(artifact.read_bytes(), dest)
        assert "lib/nested/data.bin" in names
        assert _snapshot(dest) == _snapshot(ext_tree)

    def test_extract_accepts_uncompressed_tarball(self, ext_tree, tmp_path):
        extract_archive(pack(ext_tree), tmp_path / "ext")
        assert (tmp_path / "ext" / "pg_ext.so").exists()

    def test_output_not_writable(self, ext_tree, tmp_path):
        with pytest.raises(ArchiveError, match="Cannot write"):
            package_directory(ext_tree, tmp_path / "no" / "such" / "dir" / "x.tar.gz")
