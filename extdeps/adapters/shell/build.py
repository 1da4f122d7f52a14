"""
Shell build host — a host that compiles by running a shell command.

Used by the CLI: the build command is split like a shell would split
it, build arguments are appended, and it runs inside the extension
directory. Without a command, building is a no-op.
"""

from __future__ import annotations

import logging
import shlex
from pathlib import Path

import click

from extdeps.adapters.base import ExtensionHost
from extdeps.core.errors import ExtdepsError
from extdeps.core.models.package import PackageDescriptor
from extdeps.core.services.ext_install.execution.subprocess_runner import run_command

logger = logging.getLogger(__name__)


class BuildError(ExtdepsError):
    """Raised when the build command fails."""


class ShellBuildHost(ExtensionHost):
    """Build extensions with an arbitrary shell command.

    Args:
        package: The package being installed.
        extension_dir: Extension output directory (created on build).
        build_command: Command line to compile the extension, or None.
        quiet: Suppress progress notices.
    """

    def __init__(
        self,
        package: PackageDescriptor,
        extension_dir: str | Path,
        *,
        build_command: str | None = None,
        quiet: bool = False,
    ) -> None:
        self._package = package
        self._extension_dir = Path(extension_dir)
        self.build_command = build_command
        self.quiet = quiet
        self.builds: list[list[str]] = []

    @property
    def package(self) -> PackageDescriptor:
        return self._package

    @property
    def extension_dir(self) -> Path:
        return self._extension_dir

    @property
    def has_extensions(self) -> bool:
        return True

    def build_extensions(self, build_args: list[str]) -> None:
        self._extension_dir.mkdir(parents=True, exist_ok=True)
        self.builds.append(list(build_args))

        if not self.build_command:
            logger.debug("No build command for %s; nothing to compile", self._package.full_name)
            return

        try:
            cmd = shlex.split(self.build_command) + list(build_args)
        except ValueError as e:
            raise BuildError(f"Cannot parse build command {self.build_command!r}: {e}") from e

        result = run_command(cmd, cwd=str(self._extension_dir))
        if not result["ok"]:
            raise BuildError(f"Build failed for {self._package.full_name}: {result['error']}")

    def say(self, message: str) -> None:
        super().say(message)
        if not self.quiet:
            click.echo(message)
