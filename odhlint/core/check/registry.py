"""
Check registry: the ordered set of checks known to this process.

Populated once at startup by ``odhlint.checks.build_registry()`` and
read-only afterwards, so concurrent readers need no locking.
"""

from __future__ import annotations

import logging

from odhlint.core.check.base import Check
from odhlint.core.check.constants import CheckGroup
from odhlint.core.check.errors import DuplicateCheckError
from odhlint.core.check.selector import matches, validate_pattern

logger = logging.getLogger(__name__)


class CheckRegistry:
    """Append-only registry of checks, in registration order."""

    def __init__(self) -> None:
        self._checks: dict[str, Check] = {}

    def register(self, check: Check) -> None:
        """Register a check.

        Raises:
            DuplicateCheckError: If a check with the same ID is registered.
        """
        if not check.id:
            raise ValueError(f"{check.__class__.__name__} has an empty ID")
        if check.id in self._checks:
            raise DuplicateCheckError(f"check with ID {check.id!r} already registered")
        self._checks[check.id] = check
        logger.debug("Registered check: %s", check.id)

    def register_all(self, *checks: Check) -> None:
        for check in checks:
            self.register(check)

    def get(self, check_id: str) -> Check | None:
        return self._checks.get(check_id)

    def all(self) -> list[Check]:
        """Every check, in registration order."""
        return list(self._checks.values())

    def by_group(self, group: CheckGroup) -> list[Check]:
        return [c for c in self._checks.values() if c.group == group]

    def select(self, pattern: str = "*", exclude: list[str] | None = None) -> list[Check]:
        """Checks matching ``pattern`` and none of ``exclude``, in registration order."""
        validate_pattern(pattern)
        excluded = [validate_pattern(p) for p in exclude or []]
        return [
            c
            for c in self._checks.values()
            if matches(c, pattern) and not any(matches(c, p) for p in excluded)
        ]

    def __len__(self) -> int:
        return len(self._checks)

    def __contains__(self, check_id: object) -> bool:
        return check_id in self._checks
