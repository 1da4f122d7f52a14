"""
L1 Domain — Token classification (pure).

Grammar, checked in order (first match wins):

    contains "*", has a URL scheme, or ends in ".tar.gz"  → extension
    starts with "+"                                       → dev_package
    starts with "-"                                       → build_arg
    anything else                                         → os_package

Classification depends only on the token text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

SCHEME_RE = re.compile(r"\A[a-z][a-z\d]{1,5}://", re.IGNORECASE)
ARCHIVE_SUFFIX = ".tar.gz"
DEV_PACKAGE_PREFIX = "+"
BUILD_ARG_PREFIX = "-"


class TokenKind(str, Enum):
    EXTENSION = "extension"
    OS_PACKAGE = "os_package"
    DEV_PACKAGE = "dev_package"
    BUILD_ARG = "build_arg"


@dataclass(frozen=True)
class Token:
    """A classified token. ``value`` has any ``+`` prefix stripped."""

    kind: TokenKind
    value: str


def is_remote(location: str) -> bool:
    """Whether ``location`` starts with a URL scheme (``https://`` etc.)."""
    return bool(SCHEME_RE.match(location))


def classify(raw: str) -> Token:
    if "*" in raw or is_remote(raw) or raw.endswith(ARCHIVE_SUFFIX):
        return Token(TokenKind.EXTENSION, raw)
    if raw.startswith(DEV_PACKAGE_PREFIX):
        return Token(TokenKind.DEV_PACKAGE, raw[len(DEV_PACKAGE_PREFIX):])
    if raw.startswith(BUILD_ARG_PREFIX):
        # Build arguments keep their dash: "--with-foo-dir=/opt" is passed as-is
        return Token(TokenKind.BUILD_ARG, raw)
    return Token(TokenKind.OS_PACKAGE, raw)


def classify_tokens(tokens: str | list[str] | tuple[str, ...]) -> list[Token]:
    """Classify a token sequence, or a whitespace-delimited string of tokens."""
    if isinstance(tokens, str):
        tokens = tokens.split()
    return [classify(t) for t in tokens]
