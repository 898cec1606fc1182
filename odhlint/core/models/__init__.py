"""Domain models: versions, resource descriptors, targets and diagnostic results."""

from odhlint.core.models.resource import (
    NamespacedName,
    PartialObjectMetadata,
    ResourceType,
    Subscription,
)
from odhlint.core.models.result import (
    Condition,
    ConditionType,
    DiagnosticResult,
    DiagnosticResultList,
    Impact,
    ImpactedObject,
    InvalidResultError,
    Reason,
    Status,
)
from odhlint.core.models.target import IOStreams, Target
from odhlint.core.models.version import InvalidVersionError, SemVer

__all__ = [
    "Condition",
    "ConditionType",
    "DiagnosticResult",
    "DiagnosticResultList",
    "IOStreams",
    "Impact",
    "ImpactedObject",
    "InvalidResultError",
    "InvalidVersionError",
    "NamespacedName",
    "PartialObjectMetadata",
    "Reason",
    "ResourceType",
    "SemVer",
    "Status",
    "Subscription",
    "Target",
]
