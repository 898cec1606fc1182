"""
Platform-initialization protocol for service checks.

Fetches the DSCInitialization singleton and hands it to a callback.
An absent DSCInitialization is a business outcome, not an error.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from odhlint.adapters.base import NotFoundError, ReaderError
from odhlint.core.check.base import Check
from odhlint.core.check.conditions import new_condition
from odhlint.core.check.constants import ANNOTATION_TARGET_VERSION
from odhlint.core.check.errors import CheckError
from odhlint.core.models.result import ConditionType, DiagnosticResult, Reason, Status
from odhlint.core.models.target import Target
from odhlint.core.run_context import RunContext
from odhlint.core.services.cluster import get_dsc_initialization

logger = logging.getLogger(__name__)

PlatformValidateFn = Callable[[DiagnosticResult, dict[str, Any]], None]


class PlatformBuilder:
    def __init__(self, check: Check, target: Target):
        self._check = check
        self._target = target

    def run(self, ctx: RunContext, fn: PlatformValidateFn) -> DiagnosticResult:
        try:
            dsci = get_dsc_initialization(ctx, self._target.client)
        except NotFoundError:
            logger.debug("%s: no DSCInitialization", self._check.id)
            result = self._check.new_result()
            result.set_condition(new_condition(
                ConditionType.AVAILABLE, Status.FALSE, Reason.RESOURCE_NOT_FOUND,
                "No DSCInitialization found",
            ))
            return result
        except ReaderError as e:
            raise CheckError(f"getting DSCInitialization: {e}") from e

        result = self._check.new_result()
        if self._target.target_version is not None:
            result.annotations[ANNOTATION_TARGET_VERSION] = str(self._target.target_version)

        fn(result, dsci)
        return result


def platform(check: Check, target: Target) -> PlatformBuilder:
    return PlatformBuilder(check, target)
