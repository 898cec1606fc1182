"""
Semantic version value used by targets and applicability gates.

Parsing is lenient about a leading ``v`` and missing minor/patch parts
(``"3"`` → ``3.0.0``). Pre-release and build suffixes are kept for
display and ordered the usual way: ``3.0.0-rc1 < 3.0.0``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_SEMVER_RE = re.compile(
    r"^v?(?P<major>\d+)(?:\.(?P<minor>\d+))?(?:\.(?P<patch>\d+))?"
    r"(?:-(?P<pre>[0-9A-Za-z.-]+))?(?:\+(?P<build>[0-9A-Za-z.-]+))?$"
)


class InvalidVersionError(ValueError):
    """Raised when a string is not a semantic version."""


@dataclass(frozen=True, order=False)
class SemVer:
    """An immutable semantic version."""

    major: int
    minor: int = 0
    patch: int = 0
    prerelease: str = ""
    build: str = field(default="", compare=False)

    @classmethod
    def parse(cls, raw: str) -> SemVer:
        """Parse ``raw`` into a SemVer.

        Raises:
            InvalidVersionError: If ``raw`` is not a version string.
        """
        match = _SEMVER_RE.match((raw or "").strip())
        if match is None:
            raise InvalidVersionError(f"invalid semantic version: {raw!r}")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor") or 0),
            patch=int(match.group("patch") or 0),
            prerelease=match.group("pre") or "",
            build=match.group("build") or "",
        )

    @classmethod
    def try_parse(cls, raw: str | None) -> SemVer | None:
        """Parse ``raw``, returning None for empty or malformed input."""
        if not raw:
            return None
        try:
            return cls.parse(raw)
        except InvalidVersionError:
            return None

    def _key(self) -> tuple:
        # A release sorts after any of its pre-releases.
        if not self.prerelease:
            pre: tuple = (1,)
        else:
            parts = []
            for ident in self.prerelease.split("."):
                if ident.isdigit():
                    parts.append((0, int(ident), ""))
                else:
                    parts.append((1, 0, ident))
            pre = (0, tuple(parts))
        return (self.major, self.minor, self.patch, pre)

    def __lt__(self, other: SemVer) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other: SemVer) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: SemVer) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: SemVer) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._key() >= other._key()

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.build:
            text += f"+{self.build}"
        return text
