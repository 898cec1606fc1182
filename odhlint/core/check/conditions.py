"""
Condition construction with impact derivation.

Impact follows Status unless given explicitly:

    True     → no impact  (requirement met)
    False    → Blocking   (requirement not met)
    Unknown  → Advisory   (could not determine)
"""

from __future__ import annotations

from odhlint.core.models.result import (
    Condition,
    ConditionType,
    Impact,
    InvalidResultError,
    Reason,
    Status,
)

_DERIVED_IMPACT: dict[Status, Impact | None] = {
    Status.TRUE: None,
    Status.FALSE: Impact.BLOCKING,
    Status.UNKNOWN: Impact.ADVISORY,
}


def derive_impact(status: Status) -> Impact | None:
    return _DERIVED_IMPACT[Status(status)]


def new_condition(
    condition_type: ConditionType,
    status: Status,
    reason: Reason,
    message: str,
    *args: object,
    impact: Impact | None = None,
    remediation: str = "",
) -> Condition:
    """Build a validated Condition.

    ``message`` is %-formatted with ``args`` when any are given. Pass
    ``impact`` to override the status-derived default (for example an
    Advisory deprecation with Status False).

    Raises:
        InvalidResultError: If type, status or reason is not valid.
    """
    if args:
        message = message % args

    try:
        status = Status(status)
        condition = Condition(
            type=ConditionType(condition_type),
            status=status,
            reason=Reason(reason),
            message=message,
            impact=impact if impact is not None else derive_impact(status),
            remediation=remediation,
        )
    except ValueError as e:
        raise InvalidResultError(f"invalid condition: {e}") from e

    condition.ensure_valid()
    return condition
