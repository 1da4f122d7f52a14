"""
L4 Execution — OS package installation.

Renders the manifest's install command template and runs it once for
the whole package list. A failed install is reported as a warning and
never aborts the surrounding build.
"""

from __future__ import annotations

import logging
import shlex
from typing import Any, Callable

from extdeps.core.errors import InstallError
from extdeps.core.models.manifest import PACKAGES_PLACEHOLDER
from extdeps.core.services.ext_install.execution.subprocess_runner import run_command

logger = logging.getLogger(__name__)

Runner = Callable[..., dict[str, Any]]


def render_install_command(template: str, packages: list[str]) -> list[str]:
    """Substitute the package list into the command template, once.

    A stand-alone ``${packages}`` argument expands to one argument per
    package; a placeholder embedded in a larger argument is replaced by
    the space-joined names. Package names are never re-scanned.
    The command runs without a shell, so shell operators such as
    ``&&``, pipes and redirects are not supported.

    Example::

        >>> render_install_command("pkgmgr install ${packages}", ["a", "b"])
        ['pkgmgr', 'install', 'a', 'b']

    Raises:
        InstallError: If the template is empty, unparseable, or has no
            placeholder.
    """
    try:
        argv = shlex.split(template)
    except ValueError as e:
        raise InstallError(f"Cannot parse install command {template!r}: {e}") from e
    if not argv:
        raise InstallError("Install command is empty")

    rendered: list[str] = []
    substituted = False
    for arg in argv:
        if substituted:
            rendered.append(arg)
        elif arg == PACKAGES_PLACEHOLDER:
            rendered.extend(packages)
            substituted = True
        elif PACKAGES_PLACEHOLDER in arg:
            rendered.append(arg.replace(PACKAGES_PLACEHOLDER, " ".join(packages), 1))
            substituted = True
        else:
            rendered.append(arg)

    if not substituted:
        raise InstallError(f"Install command has no {PACKAGES_PLACEHOLDER} placeholder: {template!r}")
    return rendered


class PackageInstaller:
    """Installs OS packages with the manifest's command template."""

    def __init__(
        self,
        command_template: str,
        *,
        runner: Runner | None = None,
        timeout: float | None = None,
    ) -> None:
        self.command_template = command_template
        self.runner = runner or run_command
        self.timeout = timeout

    def install(self, packages: list[str]) -> bool:
        """Install ``packages`` in a single child process.

        Returns:
            True on success. False (with a warning logged) when the
            command fails, times out, or cannot be started.
        """
        if not packages:
            return True

        argv = render_install_command(self.command_template, packages)
        result = self.runner(argv, timeout=self.timeout)
        if not result.get("ok"):
            logger.warning(
                "Unable to execute: %s (%s)",
                shlex.join(argv), result.get("error", "unknown error"),
            )
            return False

        logger.info("Installed %d OS package(s): %s", len(packages), " ".join(packages))
        return True
