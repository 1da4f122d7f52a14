"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

import logging
import os
import textwrap
from pathlib import Path
from typing import Callable

import pytest

from extdeps.adapters.base import ExtensionHost
from extdeps.core.models.package import PackageDescriptor

MANIFEST_YML = textwrap.dedent("""\
    gems:
      "*":
        command: "pkgmgr install ${packages}"
      pg: libpq5 *
      sqlite3:
      mysql2: "*"
      nokogiri:
        "< 1.16": libxml2 libxslt1.1
        ">= 1.16":
      ffi:
        - libffi8
        - "*"
        - libffi8
      puma:
        ">= 7.0": "*"
      bcrypt: "+libssl-dev --with-openssl-dir=/opt/ssl libssl3 *"
""")


class FakeHost(ExtensionHost):
    """Host double: records builds and notices, "compiles" one file."""

    def __init__(
        self,
        name: str,
        version: str,
        extension_dir: Path,
        *,
        has_extensions: bool = True,
    ) -> None:
        self._package = PackageDescriptor(name=name, version=version)
        self._extension_dir = extension_dir
        self._has_extensions = has_extensions
        self.builds: list[list[str]] = []
        self.notices: list[str] = []

    @property
    def package(self) -> PackageDescriptor:
        return self._package

    @property
    def extension_dir(self) -> Path:
        return self._extension_dir

    @property
    def has_extensions(self) -> bool:
        return self._has_extensions

    def build_extensions(self, build_args: list[str]) -> None:
        self.builds.append(list(build_args))
        self._extension_dir.mkdir(parents=True, exist_ok=True)
        (self._extension_dir / f"{self._package.name}.so").write_bytes(b"\x7fELF compiled")

    def say(self, message: str) -> None:
        self.notices.append(message)


@pytest.fixture(autouse=True)
def _reset_extdeps_logger():
    """Undo CLI logging setup so caplog sees engine records in every test."""
    yield
    logger = logging.getLogger("extdeps")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def manifest_path(tmp_path: Path) -> Path:
    """The sample manifest written to <tmp>/deps/gems.yml."""
    deps = tmp_path / "deps"
    deps.mkdir()
    path = deps / "gems.yml"
    path.write_text(MANIFEST_YML)
    return path


@pytest.fixture
def make_host(tmp_path: Path) -> Callable[..., FakeHost]:
    """Factory for FakeHost instances with an extension dir under tmp."""

    def _make(name: str = "pg", version: str = "1.5.4", **kwargs) -> FakeHost:
        return FakeHost(name, version, tmp_path / "ext" / name, **kwargs)

    return _make


@pytest.fixture
def ext_tree(tmp_path: Path) -> Path:
    """A small compiled-extension tree with distinct permission bits."""
    root = tmp_path / "tree"
    (root / "lib" / "nested").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "pg_ext.so").write_bytes(b"\x7fELF\x00\x01binary")
    (root / "lib" / "helper.rb").write_text("puts 'hi'\n")
    (root / "lib" / "nested" / "data.bin").write_bytes(bytes(range(256)) * 4)
    (root / "gem.build_complete").write_bytes(b"")

    os.chmod(root / "pg_ext.so", 0o755)
    os.chmod(root / "lib" / "helper.rb", 0o644)
    os.chmod(root / "lib" / "nested" / "data.bin", 0o600)
    os.chmod(root / "gem.build_complete", 0o640)
    os.chmod(root / "lib" / "nested", 0o700)
    os.chmod(root / "empty", 0o750)
    os.chmod(root / "lib", 0o755)
    return root

