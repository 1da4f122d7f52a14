"""
Manifest model — the parsed dependency manifest.

Loaded once per process from a YAML document shaped like::

    gems:
      "*":
        command: "apt-get install -y ${packages}"
      pg: libpq5 *
      nokogiri:
        ">= 1.16": "*"
        "< 1.16": libxml2 libxslt1.1

The reserved ``"*"`` entry carries the OS package-install command; all
other keys map package names to dependency specs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

from pydantic import BaseModel, ConfigDict, field_validator

if TYPE_CHECKING:
    from extdeps.core.services.ext_install.domain.dependency_spec import DependencySpec

PACKAGES_PLACEHOLDER = "${packages}"
RESERVED_KEY = "*"


class PackageManager(BaseModel):
    """The reserved ``"*"`` entry: how to install OS packages."""

    model_config = ConfigDict(frozen=True)

    command: str

    @field_validator("command")
    @classmethod
    def _require_placeholder(cls, value: str) -> str:
        if PACKAGES_PLACEHOLDER not in value:
            raise ValueError(f"install command must contain {PACKAGES_PLACEHOLDER}")
        return value


@dataclass(frozen=True)
class Manifest:
    """Parsed manifest — immutable once loaded."""

    location: str = ""
    gems: Mapping[str, DependencySpec] = field(default_factory=dict)
    package_manager: PackageManager | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "gems", MappingProxyType(dict(self.gems)))

    def lookup(self, name: str) -> DependencySpec | None:
        """Return the spec for a package, or None when it has no entry."""
        if name == RESERVED_KEY:
            return None
        return self.gems.get(name)

    @property
    def install_command(self) -> str | None:
        return self.package_manager.command if self.package_manager else None
