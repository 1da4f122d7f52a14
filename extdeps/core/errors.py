"""
Error hierarchy — every failure the engine reports to its host.

Modules raise the specific subclass next to the code that detects the
failure; the CLI catches ``ExtdepsError`` and prints a single line.
"""

from __future__ import annotations


class ExtdepsError(Exception):
    """Base class for all engine failures."""


class ConfigError(ExtdepsError):
    """Raised when environment configuration is invalid."""


class ManifestError(ExtdepsError):
    """Raised when the manifest cannot be fetched, parsed, or validated."""


class FetchError(ExtdepsError):
    """Raised when a location cannot be read (network or filesystem)."""


class ArchiveError(ExtdepsError):
    """Raised when an archive cannot be packed, inflated, or unpacked."""


class InstallError(ExtdepsError):
    """Raised when an OS package install cannot even be attempted."""


class PackageError(ExtdepsError):
    """Raised when the host-supplied package descriptor cannot be used."""
