"""
Operator-presence protocol.

Is there an OLM Subscription matching a name/channel policy, and what
version does it have installed? The single resulting condition comes
from a replaceable builder, so checks can invert the success criteria
(e.g. "the v2 operator must be gone").
"""

from __future__ import annotations

import logging
from typing import Callable

from odhlint.adapters.base import ReaderError
from odhlint.core.check.base import Check
from odhlint.core.check.conditions import new_condition
from odhlint.core.check.constants import ANNOTATION_INSTALLED_VERSION, ANNOTATION_TARGET_VERSION
from odhlint.core.check.errors import CheckError
from odhlint.core.models.resource import Subscription
from odhlint.core.models.result import Condition, ConditionType, DiagnosticResult, Reason, Status
from odhlint.core.models.target import Target
from odhlint.core.run_context import RunContext
from odhlint.core.services.cluster import find_operator

logger = logging.getLogger(__name__)

OLM_UNAVAILABLE_MESSAGE = "OLM client not available"

ConditionBuilder = Callable[[bool, str], Condition]


class OperatorBuilder:
    """Fluent builder for the operator-presence protocol.

    Defaults: a subscription matches when its name equals the check's
    kind, and the condition is Available=True/ResourceFound or
    Available=False/ResourceNotFound.
    """

    def __init__(self, check: Check, target: Target):
        self._check = check
        self._target = target
        self._names: list[str] = []
        self._channels: list[str] = []
        self._condition_builder: ConditionBuilder = self._default_condition

    def _default_condition(self, found: bool, version: str) -> Condition:
        kind = self._check.kind
        if not found:
            return new_condition(
                ConditionType.AVAILABLE, Status.FALSE, Reason.RESOURCE_NOT_FOUND,
                "%s operator is not installed", kind,
            )
        return new_condition(
            ConditionType.AVAILABLE, Status.TRUE, Reason.RESOURCE_FOUND,
            "%s operator installed: %s", kind, version,
        )

    def with_names(self, *names: str) -> OperatorBuilder:
        """Match subscriptions named any of ``names``."""
        self._names = list(names)
        return self

    def with_channels(self, *channels: str) -> OperatorBuilder:
        """Also require the subscription channel to be one of ``channels``."""
        self._channels = list(channels)
        return self

    def with_condition_builder(self, builder: ConditionBuilder) -> OperatorBuilder:
        self._condition_builder = builder
        return self

    def matcher(self) -> Callable[[Subscription], bool]:
        names = self._names or [self._check.kind]
        channels = list(self._channels)

        def _match(sub: Subscription) -> bool:
            if sub.name not in names:
                return False
            if channels:
                return bool(sub.channel) and sub.channel in channels
            return True

        return _match

    def run(self, ctx: RunContext) -> DiagnosticResult:
        result = self._check.new_result()
        if self._target.target_version is not None:
            result.annotations[ANNOTATION_TARGET_VERSION] = str(self._target.target_version)

        if not self._target.client.olm.available():
            logger.debug("%s: OLM not available", self._check.id)
            condition = self._condition_builder(False, "")
            condition.message = OLM_UNAVAILABLE_MESSAGE
            result.set_condition(condition)
            return result

        try:
            sub = find_operator(ctx, self._target.client, self.matcher())
        except ReaderError as e:
            raise CheckError(f"checking {self._check.kind} operator presence: {e}") from e

        version = sub.installed_version if sub is not None else ""
        result.set_condition(self._condition_builder(sub is not None, version))
        if version:
            result.annotations[ANNOTATION_INSTALLED_VERSION] = version
        return result


def operator(check: Check, target: Target) -> OperatorBuilder:
    return OperatorBuilder(check, target)
