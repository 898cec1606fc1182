"""
Component-scoped protocol.

The common shape of a component check: fetch the DataScienceCluster,
read one component's management state, decide whether to run, then
hand the state to a callback.

    validate.component(self, target)
        .in_state(ManagementState.MANAGED)
        .run(ctx, validate.removal("CodeFlare is %s but removed in %s"))

Absence rules:
    no DataScienceCluster          → Available=False/ResourceNotFound, callback skipped
    component field missing        → state "Removed"
    state outside in_state(...)    → Configured=True/RequirementsMet, callback skipped
    applications namespace absent  → Available=False/ResourceNotFound, callback skipped
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from odhlint.adapters.base import NotFoundError, ReaderError
from odhlint.core.check.base import Check
from odhlint.core.check.conditions import new_condition
from odhlint.core.check.constants import (
    ANNOTATION_MANAGEMENT_STATE,
    ANNOTATION_TARGET_VERSION,
    ManagementState,
)
from odhlint.core.check.errors import CheckError
from odhlint.core.check.fieldpath import FieldNotFoundError, FieldPathError, query_string
from odhlint.core.check.version_gate import major_minor_label
from odhlint.core.models.result import (
    Condition,
    ConditionType,
    DiagnosticResult,
    Impact,
    Reason,
    Status,
)
from odhlint.core.models.target import Target
from odhlint.core.run_context import RunContext
from odhlint.core.services.cluster import get_applications_namespace, get_data_science_cluster

logger = logging.getLogger(__name__)


@dataclass
class ComponentRequest:
    """What a component callback gets to work with."""

    target: Target
    result: DiagnosticResult
    dsc: dict[str, Any]
    management_state: str
    applications_namespace: str = ""

    @property
    def client(self):
        return self.target.client

    @property
    def target_version(self):
        return self.target.target_version


ComponentValidateFn = Callable[[RunContext, ComponentRequest], None]
ComponentConditionFn = Callable[[RunContext, ComponentRequest], list[Condition]]


def management_state(dsc: dict[str, Any], component: str) -> str:
    """Management state of ``component``; a missing field reads as Removed."""
    try:
        return query_string(dsc, f".spec.components.{component}.managementState")
    except FieldNotFoundError:
        return str(ManagementState.REMOVED)


def _not_found(check: Check, message: str) -> DiagnosticResult:
    result = check.new_result()
    result.set_condition(new_condition(
        ConditionType.AVAILABLE, Status.FALSE, Reason.RESOURCE_NOT_FOUND, message,
    ))
    return result


class ComponentBuilder:
    """Fluent builder for the component-scoped protocol."""

    def __init__(self, check: Check, target: Target):
        self._check = check
        self._target = target
        self._component = check.kind
        self._required_states: list[str] = []
        self._load_namespace = False

    def with_component_name(self, name: str) -> ComponentBuilder:
        """Read the state of ``name`` instead of the check's kind."""
        self._component = name
        return self

    def in_state(self, *states: str) -> ComponentBuilder:
        """Only invoke the callback when the state is one of ``states``."""
        self._required_states = [str(s) for s in states]
        return self

    def with_applications_namespace(self) -> ComponentBuilder:
        """Resolve the applications namespace before invoking the callback."""
        self._load_namespace = True
        return self

    def run(self, ctx: RunContext, fn: ComponentValidateFn) -> DiagnosticResult:
        try:
            dsc = get_data_science_cluster(ctx, self._target.client)
        except NotFoundError:
            logger.debug("%s: no DataScienceCluster", self._check.id)
            return _not_found(self._check, "No DataScienceCluster found")
        except ReaderError as e:
            raise CheckError(f"getting DataScienceCluster: {e}") from e

        try:
            state = management_state(dsc, self._component)
        except FieldPathError as e:
            raise CheckError(f"querying {self._component} managementState: {e}") from e

        if self._required_states and state not in self._required_states:
            logger.debug(
                "%s: state %s not in %s, skipping",
                self._check.id, state, self._required_states,
            )
            result = self._check.new_result()
            result.set_condition(new_condition(
                ConditionType.CONFIGURED,
                Status.TRUE,
                Reason.REQUIREMENTS_MET,
                "%s is %s; check not required",
                self._component, state,
            ))
            return result

        result = self._check.new_result()
        result.annotations[ANNOTATION_MANAGEMENT_STATE] = state
        if self._target.target_version is not None:
            result.annotations[ANNOTATION_TARGET_VERSION] = str(self._target.target_version)

        req = ComponentRequest(
            target=self._target,
            result=result,
            dsc=dsc,
            management_state=state,
        )

        if self._load_namespace:
            try:
                req.applications_namespace = get_applications_namespace(ctx, self._target.client)
            except NotFoundError:
                logger.debug("%s: applications namespace not found", self._check.id)
                result.set_condition(new_condition(
                    ConditionType.AVAILABLE,
                    Status.FALSE,
                    Reason.RESOURCE_NOT_FOUND,
                    "No DSCInitialization found",
                ))
                return result
            except (ReaderError, FieldPathError) as e:
                raise CheckError(f"getting applications namespace: {e}") from e

        fn(ctx, req)
        return result

    def complete(self, ctx: RunContext, fn: ComponentConditionFn) -> DiagnosticResult:
        """Like ``run``, with a callback that returns conditions to set."""
        def _apply(ctx: RunContext, req: ComponentRequest) -> None:
            for condition in fn(ctx, req):
                req.result.set_condition(condition)

        return self.run(ctx, _apply)


def component(check: Check, target: Target) -> ComponentBuilder:
    return ComponentBuilder(check, target)


def removal(
    fmt: str,
    impact: Impact | None = None,
    remediation: str = "",
) -> ComponentValidateFn:
    """Callback reporting that an active component is removed in the target release.

    ``fmt`` receives the management state and the target ``major.minor``.
    """
    def _fn(ctx: RunContext, req: ComponentRequest) -> None:
        req.result.set_condition(new_condition(
            ConditionType.COMPATIBLE,
            Status.FALSE,
            Reason.VERSION_INCOMPATIBLE,
            fmt,
            req.management_state,
            major_minor_label(req.target_version),
            impact=impact,
            remediation=remediation,
        ))

    return _fn
