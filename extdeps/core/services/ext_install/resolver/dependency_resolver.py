"""
L2 Resolver — manifest entry → ordered tokens → dependency plan.

Resolution never touches the network: the manifest is already loaded
and classification is purely textual.
"""

from __future__ import annotations

import logging

from extdeps.core.errors import PackageError
from extdeps.core.models.manifest import Manifest
from extdeps.core.models.package import PackageDescriptor
from extdeps.core.models.plan import DependencyPlan
from extdeps.core.services.ext_install.domain.dependency_spec import (
    DependencySpec,
    VersionTable,
    dedupe_tokens,
)
from extdeps.core.services.ext_install.domain.templating import classify_and_expand
from extdeps.core.services.ext_install.domain.tokens import TokenKind, classify
from extdeps.core.services.ext_install.domain.version_requirement import (
    InvalidRequirementError,
)

logger = logging.getLogger(__name__)


def resolve_spec(manifest: Manifest, package: PackageDescriptor) -> DependencySpec | None:
    """Find the spec that applies to this package and version.

    Returns:
        The matching spec, or None when the package has no entry or no
        version-table requirement is satisfied.

    Raises:
        PackageError: If a version table applies and the package version
            is not a valid version number.
    """
    spec = manifest.lookup(package.name)
    if spec is None:
        logger.debug("No manifest entry for %s", package.name)
        return None

    if isinstance(spec, VersionTable):
        try:
            matched = spec.match(package.version)
        except InvalidRequirementError as e:
            raise PackageError(
                f"Cannot match {package.full_name} against its manifest entry: {e}"
            ) from e
        if matched is None:
            logger.debug(
                "No requirement in the manifest entry for %s matches version %s",
                package.name, package.version,
            )
        return matched

    return spec


def resolve_tokens(manifest: Manifest, package: PackageDescriptor) -> list[str] | None:
    """Ordered, de-duplicated raw tokens for a package.

    None means "no dependencies": the package is absent from the
    manifest or its version matched nothing. An absent entry is never
    treated as an implicit wildcard.
    """
    spec = resolve_spec(manifest, package)
    if spec is None:
        return None
    tokens = dedupe_tokens(spec.tokens)
    logger.debug("Resolved %s → %s", package.full_name, tokens)
    return tokens


def build_plan(
    tokens: list[str],
    *,
    manifest_location: str,
    package: PackageDescriptor,
    cwd: str,
    compile_mode: bool = False,
) -> DependencyPlan:
    """Classify tokens and expand locators into a ``DependencyPlan``.

    Outside compile mode, plain names are OS packages and locators are
    archives to unpack. In compile mode only ``+package`` (installed
    before building) and ``-argument`` (passed to the build) count.
    """
    if not compile_mode:
        packages, extensions = classify_and_expand(tokens, manifest_location, cwd, package)
        return DependencyPlan(packages=packages, extensions=extensions)

    plan = DependencyPlan(build_args=[])
    for token in map(classify, tokens):
        if token.kind is TokenKind.DEV_PACKAGE:
            plan.packages.append(token.value)
        elif token.kind is TokenKind.BUILD_ARG:
            plan.build_args.append(token.value)
    return plan


def plan_dependencies(
    manifest: Manifest,
    package: PackageDescriptor,
    *,
    cwd: str,
    compile_mode: bool = False,
) -> DependencyPlan | None:
    """Resolve and plan in one step; None when there are no dependencies."""
    tokens = resolve_tokens(manifest, package)
    if tokens is None:
        return None
    return build_plan(
        tokens,
        manifest_location=manifest.location,
        package=package,
        cwd=cwd,
        compile_mode=compile_mode,
    )
