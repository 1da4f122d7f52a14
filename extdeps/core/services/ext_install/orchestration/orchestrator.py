"""
L5 Orchestration — The build-mode state machine.

    Start → { NoOp | SelfPackage | Compile | Dependency } → Done

The directive picks the mode:

    unset / ""          NoOp         host does its default build
    "+"                 SelfPackage  build, then archive the result
    "+<manifest>"       Compile      install "+pkg" deps, build with "-args", archive
    "<manifest>"        Dependency   install OS packages, unpack prebuilt archives

A host only holds an orchestrator when it declares native extensions
and a directive is set; see ``select_strategy()``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable

from extdeps.adapters.base import ExtensionHost
from extdeps.core.errors import ManifestError
from extdeps.core.models.manifest import Manifest
from extdeps.core.models.plan import BuildMode, BuildReport, DependencyPlan
from extdeps.core.services.ext_install.execution.archive import (
    extract_archive,
    package_directory,
)
from extdeps.core.services.ext_install.execution.fetcher import Fetcher
from extdeps.core.services.ext_install.execution.manifest_cache import ManifestCache
from extdeps.core.services.ext_install.execution.package_installer import PackageInstaller
from extdeps.core.services.ext_install.resolver.dependency_resolver import plan_dependencies

logger = logging.getLogger(__name__)

SELF_PACKAGE_DIRECTIVE = "+"

InstallerFactory = Callable[[str], PackageInstaller]


def parse_directive(directive: str | None) -> tuple[BuildMode, str]:
    """Split a directive into its mode and manifest location.

    Returns:
        ``(mode, location)``; location is "" for noop and self_package.
    """
    if directive is None or not directive.strip():
        return BuildMode.NOOP, ""

    directive = directive.strip()
    if directive.startswith(SELF_PACKAGE_DIRECTIVE):
        location = directive[len(SELF_PACKAGE_DIRECTIVE):].strip()
        if not location:
            return BuildMode.SELF_PACKAGE, ""
        return BuildMode.COMPILE, location

    return BuildMode.DEPENDENCY, directive


class BuildOrchestrator:
    """Drives one package's extensions through the selected mode.

    Args:
        host: The host installer for the package.
        cache: Shared manifest cache (one per install process).
        fetcher: Reads extension archives (default: a new Fetcher).
        cwd: Base for relative locators and where artifacts are written.
        installer_factory: Builds a PackageInstaller from a command template.
    """

    def __init__(
        self,
        host: ExtensionHost,
        cache: ManifestCache,
        *,
        fetcher: Fetcher | None = None,
        cwd: str | Path | None = None,
        installer_factory: InstallerFactory | None = None,
    ) -> None:
        self.host = host
        self.cache = cache
        self.fetcher = fetcher or Fetcher()
        self.cwd = Path(cwd) if cwd is not None else Path(os.getcwd())
        self.installer_factory = installer_factory or PackageInstaller

    # ── Entry point ─────────────────────────────────────────────

    def run(self, directive: str | None) -> BuildReport:
        """Execute the mode the directive selects.

        Returns a report in every mode, including when nothing was done.
        Manifest, fetch and archive failures propagate.
        """
        mode, location = parse_directive(directive)
        package = self.host.package
        report = BuildReport(package=package.full_name, mode=mode)
        logger.debug("Extension build for %s in %s mode", package.full_name, mode.value)

        if mode is BuildMode.NOOP:
            return report

        if mode is BuildMode.SELF_PACKAGE:
            self._build_and_package(report, build_args=[])
            return report

        manifest = self.cache.load(location)
        plan = plan_dependencies(
            manifest,
            package,
            cwd=str(self.cwd),
            compile_mode=mode is BuildMode.COMPILE,
        )
        report.resolved = plan is not None

        if mode is BuildMode.COMPILE:
            plan = plan or DependencyPlan(build_args=[])
            self._install_packages(report, manifest, plan.packages)
            self._build_and_package(report, build_args=plan.build_args or [])
            return report

        if plan is None:
            logger.debug("No dependencies for %s", package.full_name)
        else:
            self._install_packages(report, manifest, plan.packages)
            self._apply_extensions(report, plan.extensions)

        if self.host.has_extensions and not report.extensions:
            logger.warning(
                "No prebuilt extensions applied for %s; %s was not populated",
                package.full_name, self.host.extension_dir,
            )
        return report

    # ── Steps ───────────────────────────────────────────────────

    def _install_packages(self, report: BuildReport, manifest: Manifest, packages: list[str]) -> None:
        if not packages:
            return
        for name in packages:
            self.host.say(f"* Installing '{name}'")
        report.packages = list(packages)

        command = manifest.install_command
        if command is None:
            raise ManifestError(
                f"Manifest {manifest.location} has no '*' entry with an install command"
            )
        report.packages_installed = self.installer_factory(command).install(packages)

    def _build_and_package(self, report: BuildReport, build_args: list[str]) -> None:
        package = self.host.package
        report.build_args = list(build_args)
        self.host.build_extensions(list(build_args))
        report.built = True

        artifact = self.cwd / package.archive_name
        package_directory(self.host.extension_dir, artifact)
        report.artifact = str(artifact)
        self.host.say(f"Extensions packaged as {artifact}")

    def _apply_extensions(self, report: BuildReport, locators: list[str]) -> None:
        root = self.host.extension_dir
        for locator in locators:
            self.host.say(f"* Extracting '{locator}' to '{root}'")
            extract_archive(self.fetcher.fetch(locator), root)
            report.extensions.append(locator)


def select_strategy(
    host: ExtensionHost,
    directive: str | None,
    cache: ManifestCache,
    **kwargs,
) -> BuildOrchestrator | None:
    """Give the host an orchestrator only when it has work to do.

    Hosts without native extensions, or runs without a directive, get
    None and keep their default behaviour.
    """
    if not host.has_extensions:
        return None
    if parse_directive(directive)[0] is BuildMode.NOOP:
        return None
    return BuildOrchestrator(host, cache, **kwargs)
