"""
Workload-collection protocol.

List every live instance of a kind, optionally filter, hand the items
to a callback, then derive impacted objects unless the callback set
its own. One pipeline serves both item shapes:

    workloads(...)           full objects (dicts)
    workloads_metadata(...)  PartialObjectMetadata projections
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from odhlint.adapters.base import Reader, ReaderError, ResourceTypeNotFoundError
from odhlint.core.check.base import Check
from odhlint.core.check.constants import ANNOTATION_IMPACTED_COUNT, ANNOTATION_TARGET_VERSION
from odhlint.core.check.errors import CheckError
from odhlint.core.models.resource import PartialObjectMetadata, ResourceType, object_name
from odhlint.core.models.result import Condition, DiagnosticResult
from odhlint.core.models.target import IOStreams, Target
from odhlint.core.run_context import RunCancelledError, RunContext

logger = logging.getLogger(__name__)

T = TypeVar("T")  # dict (full object) or PartialObjectMetadata


@dataclass
class WorkloadRequest(Generic[T]):
    result: DiagnosticResult
    items: list[T]
    client: Reader
    target: Target
    io: IOStreams | None = None
    debug: bool = False


class WorkloadBuilder(Generic[T]):
    """Fluent builder for the workload-collection protocol."""

    def __init__(
        self,
        check: Check,
        target: Target,
        resource_type: ResourceType,
        list_fn: Callable[[RunContext], list[T]],
    ):
        self._check = check
        self._target = target
        self._resource_type = resource_type
        self._list_fn = list_fn
        self._filter_fn: Callable[[T], bool] | None = None

    def filter(self, fn: Callable[[T], bool]) -> WorkloadBuilder[T]:
        """Keep only items for which ``fn`` returns True. ``fn`` may raise."""
        self._filter_fn = fn
        return self

    def _list(self, ctx: RunContext) -> list[T]:
        kind = self._resource_type.kind
        try:
            return self._list_fn(ctx)
        except ResourceTypeNotFoundError:
            logger.debug("%s: %s not installed, treating as empty", self._check.id, kind)
            return []
        except ReaderError as e:
            raise CheckError(f"listing {kind} resources: {e}") from e

    def _filter(self, items: list[T]) -> list[T]:
        if self._filter_fn is None:
            return items

        kept: list[T] = []
        for item in items:
            try:
                if self._filter_fn(item):
                    kept.append(item)
            except RunCancelledError:
                raise
            except Exception as e:
                raise CheckError(f"filtering {self._resource_type.kind} resources: {e}") from e
        return kept

    def run(
        self,
        ctx: RunContext,
        fn: Callable[[RunContext, WorkloadRequest[T]], None],
    ) -> DiagnosticResult:
        result = self._check.new_result()
        if self._target.target_version is not None:
            result.annotations[ANNOTATION_TARGET_VERSION] = str(self._target.target_version)

        items = self._filter(self._list(ctx))
        result.annotations[ANNOTATION_IMPACTED_COUNT] = str(len(items))
        logger.debug("%s: %d %s after filtering", self._check.id, len(items), self._resource_type.kind)

        req: WorkloadRequest[T] = WorkloadRequest(
            result=result,
            items=items,
            client=self._target.client,
            target=self._target,
            io=self._target.io,
            debug=self._target.debug,
        )
        fn(ctx, req)

        if result.impacted_objects is None and items:
            result.set_impacted_objects(self._resource_type, [object_name(i) for i in items])
        return result

    def complete(
        self,
        ctx: RunContext,
        fn: Callable[[RunContext, WorkloadRequest[T]], list[Condition]],
    ) -> DiagnosticResult:
        """Like ``run``, with a callback that returns conditions to set."""
        def _apply(ctx: RunContext, req: WorkloadRequest[T]) -> None:
            for condition in fn(ctx, req):
                req.result.set_condition(condition)

        return self.run(ctx, _apply)


def workloads(
    check: Check,
    target: Target,
    resource_type: ResourceType,
) -> WorkloadBuilder[dict[str, Any]]:
    """Workload protocol over full objects."""
    return WorkloadBuilder(
        check, target, resource_type,
        lambda ctx: target.client.list(ctx, resource_type),
    )


def workloads_metadata(
    check: Check,
    target: Target,
    resource_type: ResourceType,
) -> WorkloadBuilder[PartialObjectMetadata]:
    """Workload protocol over metadata-only projections."""
    return WorkloadBuilder(
        check, target, resource_type,
        lambda ctx: target.client.list_metadata(ctx, resource_type),
    )
