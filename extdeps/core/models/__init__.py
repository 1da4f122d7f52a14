"""
Domain models for the extension engine.

    from extdeps.core.models import PackageDescriptor, Manifest, DependencyPlan
"""

from extdeps.core.models.manifest import (
    PACKAGES_PLACEHOLDER,
    RESERVED_KEY,
    Manifest,
    PackageManager,
)
from extdeps.core.models.package import PackageDescriptor
from extdeps.core.models.plan import BuildMode, BuildReport, DependencyPlan

__all__ = [
    # manifest.py
    "Manifest",
    "PACKAGES_PLACEHOLDER",
    "PackageManager",
    "RESERVED_KEY",
    # package.py
    "PackageDescriptor",
    # plan.py
    "BuildMode",
    "BuildReport",
    "DependencyPlan",
]
