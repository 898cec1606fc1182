"""
Applicability gates over optional semantic versions.

Pure predicates. A missing version never raises: the check simply
does not apply.
"""

from __future__ import annotations

from odhlint.core.models.version import SemVer


def upgrade_from_2x_to_3x(from_: SemVer | None, to: SemVer | None) -> bool:
    """True when moving from a 2.x release to a 3.x release."""
    if from_ is None or to is None:
        return False
    return from_.major == 2 and to.major == 3


def at_least(v: SemVer | None, major: int, minor: int) -> bool:
    """True when ``v`` is at or above ``major.minor``."""
    if v is None:
        return False
    return (v.major, v.minor) >= (major, minor)


def major_minor_label(v: SemVer | None) -> str:
    """``"3.0"`` style label for messages; empty when unknown."""
    if v is None:
        return ""
    return f"{v.major}.{v.minor}"
