"""
Check selection patterns.

    "*"                all checks
    "components"       group shortcut (also services, workloads, dependencies)
    "components.kserve.serverless-removal"   exact ID
    "*kserve*"         glob over check IDs
"""

from __future__ import annotations

from fnmatch import fnmatchcase

from odhlint.core.check.base import Check
from odhlint.core.check.constants import GROUP_SHORTCUTS
from odhlint.core.check.errors import InvalidPatternError


def validate_pattern(pattern: str) -> str:
    if not pattern or not pattern.strip():
        raise InvalidPatternError("check pattern must not be empty")
    if pattern.count("[") != pattern.count("]"):
        raise InvalidPatternError(f"invalid pattern {pattern!r}: unbalanced brackets")
    return pattern.strip()


def matches(check: Check, pattern: str) -> bool:
    """Whether ``check`` is selected by ``pattern``."""
    pattern = validate_pattern(pattern)
    if pattern == "*":
        return True
    if pattern in GROUP_SHORTCUTS:
        return check.group == GROUP_SHORTCUTS[pattern]
    if pattern == check.id:
        return True
    return fnmatchcase(check.id, pattern)
