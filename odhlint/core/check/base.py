"""
Check contract and shared metadata base.

A check is a stateless singleton answering two questions per run:

    can_apply(ctx, target)  should this check run at all?
    validate(ctx, target)   what does the cluster look like?

Per-run data lives only in the ``Target`` and in the
``DiagnosticResult`` that ``validate`` returns, so one instance can
serve concurrent invocations with different targets.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

from odhlint.core.check.constants import CheckGroup
from odhlint.core.models.result import DiagnosticResult
from odhlint.core.models.target import Target
from odhlint.core.run_context import RunContext


@dataclass(frozen=True)
class CheckMetadata:
    """Identity and documentation of a check."""

    id: str               # e.g. components.codeflare.removal
    name: str             # human-readable title
    description: str
    group: CheckGroup
    kind: str             # the thing being checked, e.g. codeflare
    check_type: str       # e.g. removal
    remediation: str = ""


class Check(ABC):
    """Abstract base class for all checks.

    To create a new check:
        1. Subclass BaseCheck and set METADATA
        2. Implement can_apply and validate
        3. Add it to build_registry()
    """

    @property
    @abstractmethod
    def metadata(self) -> CheckMetadata:
        """Static identity of this check."""

    @abstractmethod
    def can_apply(self, ctx: RunContext, target: Target) -> bool:
        """Whether the check applies to this target. Missing versions mean False."""

    @abstractmethod
    def validate(self, ctx: RunContext, target: Target) -> DiagnosticResult:
        """Inspect the cluster and return a diagnostic result.

        Business outcomes (absent resources, unmet requirements) are
        conditions on the result. Exceptions mean the check could not
        be evaluated.
        """

    # ── Metadata accessors ───────────────────────────────────────

    @property
    def id(self) -> str:
        return self.metadata.id

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def description(self) -> str:
        return self.metadata.description

    @property
    def group(self) -> CheckGroup:
        return self.metadata.group

    @property
    def kind(self) -> str:
        return self.metadata.kind

    @property
    def check_type(self) -> str:
        return self.metadata.check_type

    @property
    def remediation(self) -> str:
        return self.metadata.remediation

    def new_result(self) -> DiagnosticResult:
        """A fresh result stamped with this check's group/kind/name/description."""
        meta = self.metadata
        return DiagnosticResult(
            group=str(meta.group),
            kind=meta.kind,
            name=str(meta.check_type),
            description=meta.description,
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.id!r}>"


class BaseCheck(Check):
    """Check whose metadata is declared once on the class."""

    METADATA: ClassVar[CheckMetadata]

    @property
    def metadata(self) -> CheckMetadata:
        return self.METADATA
