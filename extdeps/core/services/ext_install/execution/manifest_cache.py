"""
L4 Execution — Load-once manifest cache.

One install process handles one manifest. The first successful load
fixes the cache for the lifetime of the object; later calls return the
same Manifest even if they name a different location. A failed load
leaves the cache empty so the next call tries again.

The cache is created by the entry point and handed to the
orchestrator, never reached through module state.
"""

from __future__ import annotations

import logging
import threading

from extdeps.core.config.loader import parse_manifest
from extdeps.core.errors import FetchError, ManifestError
from extdeps.core.models.manifest import Manifest
from extdeps.core.services.ext_install.execution.fetcher import Fetcher

logger = logging.getLogger(__name__)


class ManifestCache:
    """Single-slot, first-success-wins manifest cache."""

    def __init__(self, fetcher: Fetcher | None = None) -> None:
        self._fetcher = fetcher or Fetcher()
        self._manifest: Manifest | None = None
        self._lock = threading.Lock()
        self.loads = 0

    @property
    def loaded(self) -> bool:
        return self._manifest is not None

    @property
    def manifest(self) -> Manifest | None:
        return self._manifest

    def load(self, location: str) -> Manifest:
        """Return the cached manifest, fetching and parsing it on first use.

        Raises:
            ManifestError: If the first fetch or parse fails.
        """
        with self._lock:
            if self._manifest is not None:
                if location != self._manifest.location:
                    logger.debug(
                        "Manifest already loaded from %s; ignoring %s",
                        self._manifest.location, location,
                    )
                return self._manifest

            logger.debug("Loading manifest from %s", location)
            try:
                raw = self._fetcher.fetch(location)
            except FetchError as e:
                raise ManifestError(f"Cannot load manifest: {e}") from e

            self._manifest = parse_manifest(raw, location=location)
            self.loads += 1
            return self._manifest
