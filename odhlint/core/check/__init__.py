"""Check framework: contract, registry, selection, conditions and version gates."""

from odhlint.core.check.base import BaseCheck, Check, CheckMetadata
from odhlint.core.check.conditions import new_condition
from odhlint.core.check.constants import CheckGroup, CheckType, ManagementState
from odhlint.core.check.errors import CheckError, DuplicateCheckError, InvalidPatternError
from odhlint.core.check.registry import CheckRegistry

__all__ = [
    "BaseCheck",
    "Check",
    "CheckError",
    "CheckGroup",
    "CheckMetadata",
    "CheckRegistry",
    "CheckType",
    "DuplicateCheckError",
    "InvalidPatternError",
    "ManagementState",
    "new_condition",
]
