"""GoCD version values.

This module lives in the domain layer so both the media-type tables and the
services compare versions the same way. GoCD reports versions as
`MAJOR.MINOR.PATCH` and full versions as `MAJOR.MINOR.PATCH-BUILD`; only the
dotted part takes part in comparisons.
"""

from __future__ import annotations

import re
from functools import total_ordering

_VERSION_RE = re.compile(r"^\s*(\d+)\.(\d+)(?:\.(\d+))?(?:-(\d+))?\s*$")


@total_ordering
class GoVersion:
    """Comparable GoCD release number."""

    __slots__ = ("major", "minor", "patch")

    def __init__(self, major: int, minor: int, patch: int = 0) -> None:
        self.major = major
        self.minor = minor
        self.patch = patch

    @classmethod
    def parse(cls, text: str) -> "GoVersion":
        """Parse `18.2.0`, `18.2` or `18.2.0-6228`; anything else is a ValueError."""

        match = _VERSION_RE.match(text or "")
        if match is None:
            raise ValueError(f"Not a GoCD version: {text!r}")
        major, minor, patch, _build = match.groups()
        return cls(int(major), int(minor), int(patch or 0))

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GoVersion):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __lt__(self, other: "GoVersion") -> bool:
        if not isinstance(other, GoVersion):
            return NotImplemented
        return self.as_tuple() < other.as_tuple()

    def __hash__(self) -> int:
        return hash(self.as_tuple())

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def __repr__(self) -> str:
        return f"GoVersion('{self}')"
