"""
L1 Domain — Extension locator templating (pure).

Turns raw extension tokens into absolute paths or URLs. A ``*`` is a
wildcard for the default archive name (``<name>-<version>.tar.gz``)
and a leading ``*`` anchors the locator at the manifest's directory::

    manifest:  https://host/deps/gems.yml
    "*"                 → https://host/deps/foo-1.2.3.tar.gz
    "*/linux/*"         → https://host/deps/linux/foo-1.2.3.tar.gz
    "vendor/*"          → <cwd>/vendor/foo-1.2.3.tar.gz
    "/opt/ext/foo.tar.gz" → unchanged

No I/O, no subprocess.
"""

from __future__ import annotations

import posixpath
import re
from urllib.parse import parse_qsl, urlsplit, urlunsplit

from extdeps.core.models.package import PackageDescriptor
from extdeps.core.services.ext_install.domain.tokens import (
    TokenKind,
    classify,
    is_remote,
)

# Hosts that wrap file content in an HTML page unless asked for the raw bytes
RAW_CONTENT_PREFIXES = ("https://github.com/",)
RAW_CONTENT_PARAM = ("raw", "true")

_LOCATION_SUFFIX_RE = re.compile(r"[?;#]")


def manifest_base(manifest_location: str, cwd: str) -> str:
    """Directory of the manifest, ignoring any query/fragment suffix.

    Relative local manifest paths are anchored at ``cwd``.
    """
    location = _LOCATION_SUFFIX_RE.split(manifest_location, maxsplit=1)[0]
    base = posixpath.dirname(location)
    if not is_remote(location) and not base.startswith("/"):
        base = posixpath.normpath(posixpath.join(cwd, base or "."))
    return base


def force_raw_content(url: str) -> str:
    """Add ``raw=true`` to the query of raw-content host URLs, once."""
    if not url.startswith(RAW_CONTENT_PREFIXES):
        return url
    parts = urlsplit(url)
    if RAW_CONTENT_PARAM in parse_qsl(parts.query, keep_blank_values=True):
        return url
    param = "=".join(RAW_CONTENT_PARAM)
    query = f"{parts.query}&{param}" if parts.query else param
    return urlunsplit(parts._replace(query=query))


def expand_locator(
    locator: str,
    *,
    manifest_location: str,
    cwd: str,
    archive_name: str,
) -> str:
    """Expand one extension locator to an absolute path or URL."""
    base = manifest_base(manifest_location, cwd)

    if locator == "*":
        item = posixpath.join(base, archive_name)
    elif locator.startswith("*"):
        item = base + locator[1:]
    elif not locator.startswith("/") and not is_remote(locator):
        item = f"{cwd.rstrip('/')}/{locator}"
    else:
        item = locator

    item = item.replace("*", archive_name)
    return force_raw_content(item)


def classify_and_expand(
    tokens: list[str],
    manifest_location: str,
    cwd: str,
    package: PackageDescriptor,
) -> tuple[list[str], list[str]]:
    """Split resolved tokens into OS package names and archive locators.

    Dev-package and build-argument tokens only matter when compiling
    and are dropped here.

    Returns:
        ``(package_names, archive_locators)``, both in token order.
    """
    packages: list[str] = []
    locators: list[str] = []
    for token in map(classify, tokens):
        if token.kind is TokenKind.EXTENSION:
            locators.append(
                expand_locator(
                    token.value,
                    manifest_location=manifest_location,
                    cwd=cwd,
                    archive_name=package.archive_name,
                )
            )
        elif token.kind is TokenKind.OS_PACKAGE:
            packages.append(token.value)
    return packages, locators
