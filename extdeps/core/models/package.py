"""
Package descriptor — the host's view of the package being installed.

Supplied by the host installer and never constructed from manifest
data. The archive name derived here is what every ``*`` wildcard in a
locator expands to.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

ARCHIVE_EXTENSION = ".tar.gz"


class PackageDescriptor(BaseModel):
    """Name and version of a package with native extensions."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: object) -> str:
        return str(value)

    @property
    def full_name(self) -> str:
        return f"{self.name}-{self.version}"

    @property
    def archive_name(self) -> str:
        """Default extension archive name, e.g. ``foo-1.2.3.tar.gz``."""
        return f"{self.full_name}{ARCHIVE_EXTENSION}"
