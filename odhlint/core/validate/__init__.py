"""Reusable fetch → filter → populate → callback protocols for checks."""

from odhlint.core.validate.component import (
    ComponentBuilder,
    ComponentRequest,
    component,
    management_state,
    removal,
)
from odhlint.core.validate.initialization import PlatformBuilder, platform
from odhlint.core.validate.operator import OLM_UNAVAILABLE_MESSAGE, OperatorBuilder, operator
from odhlint.core.validate.workload import (
    WorkloadBuilder,
    WorkloadRequest,
    workloads,
    workloads_metadata,
)

__all__ = [
    "OLM_UNAVAILABLE_MESSAGE",
    "ComponentBuilder",
    "ComponentRequest",
    "OperatorBuilder",
    "PlatformBuilder",
    "WorkloadBuilder",
    "WorkloadRequest",
    "component",
    "management_state",
    "operator",
    "platform",
    "removal",
    "workloads",
    "workloads_metadata",
]
