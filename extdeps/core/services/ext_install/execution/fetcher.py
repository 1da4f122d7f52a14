"""
L4 Execution — Fetch raw bytes from a local path or a URL.

Locations with a URL scheme go over the network; everything else is a
filesystem path. GitHub URLs get ``raw=true`` before the request goes
out. Every failure is a ``FetchError``.
"""

from __future__ import annotations

import logging
import socket
import time
import urllib.error
import urllib.request
from pathlib import Path

from extdeps import __version__
from extdeps.core.config.settings import DEFAULT_FETCH_TIMEOUT
from extdeps.core.errors import FetchError
from extdeps.core.services.ext_install.domain.templating import force_raw_content
from extdeps.core.services.ext_install.domain.tokens import is_remote

logger = logging.getLogger(__name__)

USER_AGENT = f"extdeps/{__version__}"


class Fetcher:
    """Resolve a location string to its raw bytes."""

    def __init__(self, timeout: float = DEFAULT_FETCH_TIMEOUT) -> None:
        self.timeout = timeout

    def fetch(self, location: str) -> bytes:
        """Read ``location`` fully.

        Raises:
            FetchError: On network errors, HTTP errors, timeouts, or
                unreadable local files.
        """
        if is_remote(location):
            return self._fetch_remote(location)
        return self._fetch_local(location)

    def _fetch_remote(self, url: str) -> bytes:
        url = force_raw_content(url)
        logger.debug("GET %s (timeout=%ss)", url, self.timeout)
        start = time.monotonic()
        req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                data = resp.read()
        except urllib.error.HTTPError as e:
            raise FetchError(f"Failed to fetch {url}: HTTP {e.code} {e.reason}") from e
        except urllib.error.URLError as e:
            raise FetchError(f"Failed to fetch {url}: {e.reason}") from e
        except (socket.timeout, TimeoutError) as e:
            raise FetchError(f"Timed out fetching {url} after {self.timeout}s") from e
        except OSError as e:
            raise FetchError(f"Failed to fetch {url}: {e}") from e

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.info("Fetched %s (%d bytes, %dms)", url, len(data), elapsed_ms)
        return data

    def _fetch_local(self, location: str) -> bytes:
        path = Path(location)
        logger.debug("Reading %s", path)
        try:
            return path.read_bytes()
        except OSError as e:
            raise FetchError(f"Cannot read {path}: {e}") from e
