"""
Diagnostic result model: the output contract of every check.

A ``DiagnosticResult`` is created once per ``validate`` call (stamped
with the check's group/kind/name), mutated only inside that call and
handed to the orchestrator. It carries an ordered list of
``Condition`` facts, domain-qualified annotations and an optional list
of ``ImpactedObject`` references.

Only ``Condition.status`` feeds pass/fail rollups. ``impact`` is
rendering metadata.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, Iterable

from pydantic import BaseModel, Field

from odhlint.core.models.resource import NamespacedName, ResourceType


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class InvalidResultError(ValueError):
    """Raised when a condition or diagnostic result breaks the output contract."""


# ═══════════════════════════════════════════════════════════════════
#  Closed vocabularies
# ═══════════════════════════════════════════════════════════════════


class Status(StrEnum):
    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


class Impact(StrEnum):
    """How a non-True condition affects the upgrade."""

    BLOCKING = "blocking"
    ADVISORY = "advisory"


class ConditionType(StrEnum):
    VALIDATED = "Validated"
    AVAILABLE = "Available"
    READY = "Ready"
    COMPATIBLE = "Compatible"
    CONFIGURED = "Configured"
    AUTHORIZED = "Authorized"


class Reason(StrEnum):
    # success
    REQUIREMENTS_MET = "RequirementsMet"
    RESOURCE_FOUND = "ResourceFound"
    RESOURCE_AVAILABLE = "ResourceAvailable"
    CONFIGURATION_VALID = "ConfigurationValid"
    VERSION_COMPATIBLE = "VersionCompatible"
    PERMISSION_GRANTED = "PermissionGranted"

    # failure
    RESOURCE_NOT_FOUND = "ResourceNotFound"
    RESOURCE_UNAVAILABLE = "ResourceUnavailable"
    CONFIGURATION_INVALID = "ConfigurationInvalid"
    CONFIGURATION_UNMANAGED = "ConfigurationUnmanaged"
    VERSION_INCOMPATIBLE = "VersionIncompatible"
    PERMISSION_DENIED = "PermissionDenied"
    QUOTA_EXCEEDED = "QuotaExceeded"
    DEPENDENCY_UNAVAILABLE = "DependencyUnavailable"
    DEPRECATED = "Deprecated"
    WORKLOADS_IMPACTED = "WorkloadsImpacted"

    # unknown / error
    CHECK_EXECUTION_FAILED = "CheckExecutionFailed"
    CHECK_SKIPPED = "CheckSkipped"
    API_ACCESS_DENIED = "APIAccessDenied"
    INSUFFICIENT_DATA = "InsufficientData"


# ═══════════════════════════════════════════════════════════════════
#  Condition
# ═══════════════════════════════════════════════════════════════════


class Condition(BaseModel):
    """A typed, timestamped True/False/Unknown fact."""

    type: ConditionType
    status: Status
    reason: Reason
    message: str = ""
    impact: Impact | None = None        # None when the requirement is met
    remediation: str = ""
    last_transition_time: str = Field(default_factory=_now_iso)

    def ensure_valid(self) -> None:
        if not self.type:
            raise InvalidResultError("condition with empty type found")
        if not self.reason:
            raise InvalidResultError(f"condition {self.type!r} has empty reason")

    def to_report(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": str(self.type),
            "status": str(self.status),
            "reason": str(self.reason),
            "message": self.message,
            "lastTransitionTime": self.last_transition_time,
        }
        if self.impact is not None:
            data["impact"] = str(self.impact)
        if self.remediation:
            data["remediation"] = self.remediation
        return data


# ═══════════════════════════════════════════════════════════════════
#  Impacted objects
# ═══════════════════════════════════════════════════════════════════


class ImpactedObject(BaseModel):
    """Minimal reference to a live resource affected by a diagnostic."""

    api_version: str
    kind: str
    name: str
    namespace: str = ""
    annotations: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def for_resource(
        cls,
        resource_type: ResourceType,
        ref: NamespacedName,
        annotations: dict[str, str] | None = None,
    ) -> ImpactedObject:
        return cls(
            api_version=resource_type.api_version,
            kind=resource_type.kind,
            namespace=ref.namespace,
            name=ref.name,
            annotations=dict(annotations or {}),
        )

    @property
    def ref(self) -> NamespacedName:
        return NamespacedName(self.namespace, self.name)

    def to_report(self) -> dict[str, Any]:
        meta: dict[str, Any] = {"name": self.name}
        if self.namespace:
            meta["namespace"] = self.namespace
        if self.annotations:
            meta["annotations"] = dict(self.annotations)
        return {"apiVersion": self.api_version, "kind": self.kind, "metadata": meta}


# ═══════════════════════════════════════════════════════════════════
#  Diagnostic result
# ═══════════════════════════════════════════════════════════════════


def _is_valid_annotation_key(key: str) -> bool:
    parts = key.split("/")
    if len(parts) != 2:
        return False
    domain, name = parts
    return bool(domain) and bool(name) and "." in domain


class DiagnosticResult(BaseModel):
    """The outcome of one check invocation."""

    group: str
    kind: str
    name: str
    description: str = ""
    annotations: dict[str, str] = Field(default_factory=dict)
    conditions: list[Condition] = Field(default_factory=list)
    # None means "never set"; an explicit empty list is a valid answer.
    impacted_objects: list[ImpactedObject] | None = None

    # ── Mutation (inside validate only) ──────────────────────────

    def set_condition(self, condition: Condition) -> None:
        """Append a condition. Conditions from one call are additive."""
        self.conditions.append(condition)

    def set_impacted_objects(
        self,
        resource_type: ResourceType,
        refs: Iterable[NamespacedName],
    ) -> None:
        """Replace the impacted-object list with one reference per ``refs`` entry."""
        self.impacted_objects = [
            ImpactedObject.for_resource(resource_type, ref) for ref in refs
        ]

    # ── Rollups (read Status only) ───────────────────────────────

    @property
    def is_failing(self) -> bool:
        return any(c.status != Status.TRUE for c in self.conditions)

    @property
    def has_blocking_failure(self) -> bool:
        return any(
            c.status == Status.FALSE and c.impact == Impact.BLOCKING
            for c in self.conditions
        )

    @property
    def status_label(self) -> str:
        """Pass / Fail / Error / Unknown summary of all conditions."""
        if not self.conditions:
            return "Unknown"
        for c in self.conditions:
            if c.status == Status.FALSE:
                return "Fail"
            if c.status == Status.UNKNOWN:
                return "Error"
        return "Pass"

    @property
    def message(self) -> str:
        return self.conditions[0].message if self.conditions else ""

    # ── Contract ─────────────────────────────────────────────────

    def ensure_valid(self) -> None:
        """Check the result against the output contract.

        Raises:
            InvalidResultError: On the first violation found.
        """
        if not self.group:
            raise InvalidResultError("group must not be empty")
        if not self.kind:
            raise InvalidResultError("kind must not be empty")
        if not self.name:
            raise InvalidResultError("name must not be empty")
        for key in self.annotations:
            if not _is_valid_annotation_key(key):
                raise InvalidResultError(
                    f"annotation key {key!r} must be in domain/key format "
                    "(e.g. opendatahub.io/version)"
                )
        if not self.conditions:
            raise InvalidResultError("status.conditions must contain at least one condition")
        for condition in self.conditions:
            condition.ensure_valid()

    def to_report(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "group": self.group,
            "kind": self.kind,
            "name": self.name,
        }
        if self.annotations:
            data["annotations"] = dict(self.annotations)
        data["spec"] = {"description": self.description}
        data["status"] = {"conditions": [c.to_report() for c in self.conditions]}
        if self.impacted_objects:
            data["impactedObjects"] = [o.to_report() for o in self.impacted_objects]
        return data


class DiagnosticResultList(BaseModel):
    """All results of one run, with the versions they were evaluated against."""

    cluster_version: str | None = None
    target_version: str | None = None
    results: list[DiagnosticResult] = Field(default_factory=list)

    def to_report(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.cluster_version is not None:
            data["clusterVersion"] = self.cluster_version
        if self.target_version is not None:
            data["targetVersion"] = self.target_version
        data["results"] = [r.to_report() for r in self.results]
        return data
