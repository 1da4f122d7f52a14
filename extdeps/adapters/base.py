"""
Host base — the contract between the engine and the host installer.

The engine never compiles anything or prints to the user itself: it
asks the host to build and to show progress notices. Everything else
(spec parsing, the package's own dependency graph, signatures) stays
on the host's side of this interface.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from extdeps.core.models.package import PackageDescriptor

logger = logging.getLogger(__name__)


class ExtensionHost(ABC):
    """Abstract host installer for one package.

    To embed the engine:
        1. Subclass ExtensionHost
        2. Implement package, extension_dir, has_extensions, build_extensions
        3. Optionally override say() to route notices to your UI
        4. Pass the host to ``select_strategy()``
    """

    @property
    @abstractmethod
    def package(self) -> PackageDescriptor:
        """Name and version of the package being installed."""

    @property
    @abstractmethod
    def extension_dir(self) -> Path:
        """Where compiled extensions live; archives unpack here."""

    @property
    @abstractmethod
    def has_extensions(self) -> bool:
        """Whether the package declares native extensions."""

    @abstractmethod
    def build_extensions(self, build_args: list[str]) -> None:
        """Compile the package's extensions into ``extension_dir``.

        Raises on build failure; the engine does not catch it.
        """

    def say(self, message: str) -> None:
        """Show a progress notice to the user."""
        logger.info(message)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} package={self.package.full_name!r}>"
