"""
Manifest loader — parses a fetched manifest document into a Manifest.

Reads YAML, validates the reserved ``"*"`` entry against its Pydantic
schema, and turns every package entry into a typed dependency spec.
Any problem with the document is a ``ManifestError``.
"""

from __future__ import annotations

import logging

import yaml
from pydantic import ValidationError

from extdeps.core.errors import ManifestError
from extdeps.core.models.manifest import RESERVED_KEY, Manifest, PackageManager
from extdeps.core.services.ext_install.domain.dependency_spec import (
    DependencySpecError,
    parse_dependency_spec,
)
from extdeps.core.services.ext_install.domain.version_requirement import (
    InvalidRequirementError,
)

logger = logging.getLogger(__name__)

# Top-level key holding the package table
MANIFEST_ROOT_KEY = "gems"


def parse_manifest(raw: bytes | str, location: str = "") -> Manifest:
    """Parse and validate a manifest document.

    Args:
        raw: Document bytes (UTF-8) or text.
        location: Where the document came from; kept on the manifest
            so locators can be templated relative to it.

    Returns:
        Validated, immutable Manifest.

    Raises:
        ManifestError: If the document is not valid YAML or has the
            wrong shape.
    """
    where = location or "<manifest>"

    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ManifestError(f"Manifest {where} is not UTF-8 text: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ManifestError(f"Invalid YAML in {where}: {e}") from e

    if not isinstance(data, dict):
        raise ManifestError(f"Expected a YAML mapping in {where}, got {type(data).__name__}")

    table = data.get(MANIFEST_ROOT_KEY)
    if not isinstance(table, dict):
        raise ManifestError(f"Manifest {where} has no '{MANIFEST_ROOT_KEY}' mapping")

    package_manager: PackageManager | None = None
    gems = {}
    for name, entry in table.items():
        name = str(name)
        if name == RESERVED_KEY:
            try:
                package_manager = PackageManager.model_validate(entry)
            except ValidationError as e:
                raise ManifestError(f"Invalid '{RESERVED_KEY}' entry in {where}: {e}") from e
            continue
        try:
            gems[name] = parse_dependency_spec(entry)
        except (DependencySpecError, InvalidRequirementError) as e:
            raise ManifestError(f"Invalid entry for '{name}' in {where}: {e}") from e

    logger.info("Loaded manifest %s with %d package entries", where, len(gems))
    return Manifest(location=location, gems=gems, package_manager=package_manager)
