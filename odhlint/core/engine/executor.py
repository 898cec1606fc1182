"""
Engine executor: runs a selection of checks against one target.

Flow:
    select checks → can_apply gate → validate on a worker pool
                  → contract-check each result → LintReport

Checks are independent, so ``validate`` calls run concurrently on a
bounded thread pool. A check that raises is recorded as errored with
a remediation hint; it never aborts the run. Executions are reported
in registration order whatever order they finish in.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import UTC, datetime

from odhlint.adapters.base import ForbiddenError, ReadTimeoutError, ServiceUnavailableError
from odhlint.core.check.base import Check
from odhlint.core.check.registry import CheckRegistry
from odhlint.core.models.result import DiagnosticResult, DiagnosticResultList, InvalidResultError
from odhlint.core.models.target import Target
from odhlint.core.observability.logging_config import check_logger
from odhlint.core.run_context import RunCancelledError, RunContext

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 4

# ── Remediation hints ───────────────────────────────────────────

REMEDIATION_GENERIC = (
    "Check the error message and ensure you have proper access to the cluster resources."
)
REMEDIATION_FORBIDDEN = (
    "Insufficient permissions to access cluster resources. "
    "Ensure your ServiceAccount or user has get and list permissions on the "
    "resource types being checked, or ask your cluster administrator to grant access."
)
REMEDIATION_TIMEOUT = (
    "Request timed out. Check network connectivity to the cluster API server "
    "and verify the cluster is responsive."
)
REMEDIATION_UNAVAILABLE = (
    "API server is unavailable or overloaded. Wait a few moments and try again. "
    "If the issue persists, check cluster health with 'kubectl get nodes'."
)
REMEDIATION_CANCELLED = "The run was cancelled or exceeded its deadline before this check finished."
REMEDIATION_INVALID_RESULT = (
    "This is an internal error in the check. Please report it with the error details."
)


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


def _cause_chain(exc: BaseException):
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def remediation_for(exc: BaseException) -> str:
    """Remediation hint for an error raised by a check."""
    for err in _cause_chain(exc):
        if isinstance(err, RunCancelledError):
            return REMEDIATION_CANCELLED
        if isinstance(err, ForbiddenError):
            return REMEDIATION_FORBIDDEN
        if isinstance(err, ReadTimeoutError):
            return REMEDIATION_TIMEOUT
        if isinstance(err, ServiceUnavailableError):
            return REMEDIATION_UNAVAILABLE
        if isinstance(err, InvalidResultError):
            return REMEDIATION_INVALID_RESULT
    return REMEDIATION_GENERIC


# ═══════════════════════════════════════════════════════════════════
#  Report types
# ═══════════════════════════════════════════════════════════════════


@dataclass
class CheckExecution:
    """Outcome of running (or skipping) one check."""

    check: Check
    result: DiagnosticResult | None = None
    error: str | None = None
    error_type: str = ""
    remediation: str = ""
    skipped: bool = False
    duration_ms: int = 0

    @property
    def errored(self) -> bool:
        return self.error is not None

    @property
    def failed(self) -> bool:
        return self.result is not None and self.result.is_failing

    @property
    def passed(self) -> bool:
        return not self.skipped and not self.errored and not self.failed

    @property
    def status(self) -> str:
        if self.skipped:
            return "skipped"
        if self.errored:
            return "error"
        if self.result is None:
            return "unknown"
        return self.result.status_label.lower()

    def to_dict(self) -> dict:
        data: dict = {
            "id": self.check.id,
            "name": self.check.name,
            "group": str(self.check.group),
            "status": self.status,
            "duration_ms": self.duration_ms,
        }
        if self.result is not None:
            data["result"] = self.result.to_report()
        if self.error is not None:
            data["error"] = self.error
            data["errorType"] = self.error_type
            data["remediation"] = self.remediation
        return data


@dataclass
class LintReport:
    """Everything one run produced."""

    executions: list[CheckExecution] = field(default_factory=list)
    cluster_version: str | None = None
    target_version: str | None = None
    started_at: str = field(default_factory=_now_iso)
    ended_at: str = ""

    @property
    def total(self) -> int:
        return len(self.executions)

    @property
    def skipped(self) -> int:
        return sum(1 for e in self.executions if e.skipped)

    @property
    def errored(self) -> int:
        return sum(1 for e in self.executions if e.errored)

    @property
    def failed(self) -> int:
        return sum(1 for e in self.executions if not e.errored and e.failed)

    @property
    def passed(self) -> int:
        return sum(1 for e in self.executions if e.passed)

    @property
    def has_blocking_failure(self) -> bool:
        return any(e.result is not None and e.result.has_blocking_failure for e in self.executions)

    @property
    def evaluated(self) -> list[CheckExecution]:
        return [e for e in self.executions if e.result is not None]

    def to_result_list(self) -> DiagnosticResultList:
        return DiagnosticResultList(
            cluster_version=self.cluster_version,
            target_version=self.target_version,
            results=[e.result for e in self.evaluated if e.result is not None],
        )

    def to_dict(self) -> dict:
        return {
            "clusterVersion": self.cluster_version,
            "targetVersion": self.target_version,
            "startedAt": self.started_at,
            "endedAt": self.ended_at,
            "summary": {
                "total": self.total,
                "passed": self.passed,
                "failed": self.failed,
                "errored": self.errored,
                "skipped": self.skipped,
                "blocking": self.has_blocking_failure,
            },
            "checks": [e.to_dict() for e in self.executions],
        }


# ═══════════════════════════════════════════════════════════════════
#  Executor
# ═══════════════════════════════════════════════════════════════════


class Executor:
    """Runs checks from a registry against a target."""

    def __init__(self, registry: CheckRegistry, workers: int = DEFAULT_WORKERS):
        if workers < 1:
            raise ValueError("workers must be >= 1")
        self._registry = registry
        self._workers = workers

    def execute(
        self,
        ctx: RunContext,
        target: Target,
        checks: list[Check] | None = None,
    ) -> LintReport:
        """Run ``checks`` (default: every registered check)."""
        if checks is None:
            checks = self._registry.all()

        report = LintReport(
            cluster_version=str(target.current_version) if target.current_version else None,
            target_version=str(target.target_version) if target.target_version else None,
        )

        slots: list[CheckExecution | None] = []
        applicable: list[tuple[int, Check]] = []
        for check in checks:
            execution = self._gate(ctx, target, check)
            slots.append(execution)
            if execution is None:
                applicable.append((len(slots) - 1, check))

        logger.info("Running %d of %d checks", len(applicable), len(checks))

        if applicable:
            with ThreadPoolExecutor(
                max_workers=min(self._workers, len(applicable)),
                thread_name_prefix="odhlint-check",
            ) as pool:
                futures = [
                    (idx, pool.submit(self._execute_check, ctx, target, check))
                    for idx, check in applicable
                ]
                try:
                    for idx, future in futures:
                        slots[idx] = future.result()
                except BaseException:
                    # Unblock in-flight reads before the pool waits on them.
                    ctx.cancel("run interrupted")
                    raise

        report.executions = [s for s in slots if s is not None]
        report.ended_at = _now_iso()
        return report

    def execute_selective(
        self,
        ctx: RunContext,
        target: Target,
        pattern: str = "*",
        exclude: list[str] | None = None,
    ) -> LintReport:
        """Run the checks selected by ``pattern`` minus ``exclude``.

        Raises:
            InvalidPatternError: If a pattern is unusable.
        """
        return self.execute(ctx, target, self._registry.select(pattern, exclude))

    def _gate(self, ctx: RunContext, target: Target, check: Check) -> CheckExecution | None:
        """Return a finished execution when the check must not run, else None."""
        try:
            if check.can_apply(ctx, target):
                return None
        except Exception as e:
            check_logger(logger, check.id).warning("can_apply failed: %s", e)
            return _errored(check, e, 0)

        check_logger(logger, check.id).debug("not applicable, skipping")
        return CheckExecution(check=check, skipped=True)

    def _execute_check(self, ctx: RunContext, target: Target, check: Check) -> CheckExecution:
        log = check_logger(logger, check.id)
        start = time.monotonic()
        try:
            ctx.check()
            result = check.validate(ctx, target)
            if result is None:
                raise InvalidResultError("validate returned no result")
            result.ensure_valid()
        except Exception as e:
            duration_ms = int((time.monotonic() - start) * 1000)
            log.warning("%s", e)
            return _errored(check, e, duration_ms)

        duration_ms = int((time.monotonic() - start) * 1000)
        log.info("%s (%dms)", result.status_label, duration_ms)
        return CheckExecution(check=check, result=result, duration_ms=duration_ms)


def _errored(check: Check, exc: BaseException, duration_ms: int) -> CheckExecution:
    if isinstance(exc, InvalidResultError):
        message = f"invalid result from check {check.id}: {exc}"
    else:
        message = f"check execution failed: {exc}"
    return CheckExecution(
        check=check,
        error=message,
        error_type=type(exc).__name__,
        remediation=remediation_for(exc),
        duration_ms=duration_ms,
    )
