"""
L1 Domain — Version requirement matching (pure).

RubyGems-style versions and requirements: dotted segments, alphabetic
segments mark prereleases, comma-separated clauses must all hold.
No I/O, no subprocess.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering


class InvalidRequirementError(ValueError):
    """Raised when a version or requirement string cannot be parsed."""


_VERSION_RE = re.compile(r"\A\s*([0-9]+(?:\.[0-9a-zA-Z]+)*(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?)\s*\Z")
_CLAUSE_RE = re.compile(r"\A\s*(=|!=|>=|<=|>|<|~>)?\s*(\S+)\s*\Z")
_SEGMENT_RE = re.compile(r"[0-9]+|[a-zA-Z]+")

OPERATORS = ("=", "!=", ">", "<", ">=", "<=", "~>")


@total_ordering
class Version:
    """A comparable package version, e.g. ``2.1.0`` or ``1.0.0.rc1``."""

    def __init__(self, text: str | int | float) -> None:
        text = str(text)
        match = _VERSION_RE.match(text)
        if not match:
            raise InvalidRequirementError(f"Malformed version number string: {text!r}")
        # Hyphenated prereleases normalise as RubyGems does: 1.0-rc1 → 1.0.pre.rc1
        self.text = match.group(1).replace("-", ".pre.")
        self.segments: tuple[int | str, ...] = tuple(
            int(s) if s.isdigit() else s for s in _SEGMENT_RE.findall(self.text)
        )

    @property
    def prerelease(self) -> bool:
        return any(isinstance(s, str) for s in self.segments)

    @property
    def release(self) -> Version:
        """The version with prerelease segments removed."""
        if not self.prerelease:
            return self
        numeric: list[str] = []
        for seg in self.segments:
            if isinstance(seg, str):
                break
            numeric.append(str(seg))
        return Version(".".join(numeric) or "0")

    def bump(self) -> Version:
        """Next significant release: ``1.2.3`` → ``1.3``, ``5`` → ``6``."""
        segments = list(self.release.segments)
        if len(segments) > 1:
            segments.pop()
        segments[-1] = int(segments[-1]) + 1
        return Version(".".join(str(s) for s in segments))

    def _canonical(self) -> tuple[int | str, ...]:
        segments = list(self.segments)
        while len(segments) > 1 and segments[-1] == 0:
            segments.pop()
        return tuple(segments)

    def _compare(self, other: Version) -> int:
        left, right = self._canonical(), other._canonical()
        for i in range(max(len(left), len(right))):
            a = left[i] if i < len(left) else 0
            b = right[i] if i < len(right) else 0
            if a == b:
                continue
            # Alphabetic (prerelease) segments sort before numeric ones
            if isinstance(a, str) and isinstance(b, int):
                return -1
            if isinstance(a, int) and isinstance(b, str):
                return 1
            return -1 if a < b else 1  # type: ignore[operator]
        return 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._compare(other) == 0

    def __lt__(self, other: Version) -> bool:
        return self._compare(other) < 0

    def __hash__(self) -> int:
        return hash(self._canonical())

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"Version({self.text!r})"


@dataclass(frozen=True)
class Clause:
    """One ``<op> <version>`` constraint."""

    op: str
    version: Version

    def satisfied_by(self, version: Version) -> bool:
        ref = self.version
        if self.op == "=":
            return version == ref
        if self.op == "!=":
            return version != ref
        if self.op == ">":
            return version > ref
        if self.op == "<":
            return version < ref
        if self.op == ">=":
            return version >= ref
        if self.op == "<=":
            return version <= ref
        # ~> : at least ref, below the next significant release
        return ref <= version and version.release < ref.bump()

    def __str__(self) -> str:
        return f"{self.op} {self.version}"


@dataclass(frozen=True)
class Requirement:
    """A set of clauses that must all hold, e.g. ``>= 1.0, < 2.0``."""

    clauses: tuple[Clause, ...]
    source: str = ""

    @classmethod
    def parse(cls, text: str | int | float | None) -> Requirement:
        """Parse a comma-separated requirement string.

        An empty string means "any version" (``>= 0``). A bare version
        means an exact match.

        Raises:
            InvalidRequirementError: If any clause is malformed.
        """
        source = "" if text is None else str(text)
        clauses: list[Clause] = []
        for part in source.split(","):
            if not part.strip():
                continue
            match = _CLAUSE_RE.match(part)
            if not match:
                raise InvalidRequirementError(f"Illformed requirement {part.strip()!r}")
            op, ver = match.group(1) or "=", match.group(2)
            clauses.append(Clause(op=op, version=Version(ver)))

        if not clauses:
            clauses.append(Clause(op=">=", version=Version("0")))
        return cls(clauses=tuple(clauses), source=source)

    def satisfied_by(self, version: Version | str) -> bool:
        if not isinstance(version, Version):
            version = Version(version)
        return all(clause.satisfied_by(version) for clause in self.clauses)

    def __str__(self) -> str:
        return ", ".join(str(c) for c in self.clauses)
