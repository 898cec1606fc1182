"""
Shipped checks and the registry that lists them.

Checks are registered explicitly, in the order reports show them.
Adding a check means adding it to ``build_registry``.
"""

from __future__ import annotations

from odhlint.checks.components import (
    CodeFlareRemovalCheck,
    KServeServerlessRemovalCheck,
    KueueConfigMapManagedCheck,
    ModelMeshRemovalCheck,
    TrainingOperatorDeprecationCheck,
)
from odhlint.checks.dependencies import (
    CertManagerInstalledCheck,
    KueueOperatorInstalledCheck,
    ServiceMeshOperator2UpgradeCheck,
)
from odhlint.checks.services import ServiceMeshRemovalCheck
from odhlint.checks.workloads import (
    KServeImpactedWorkloadsCheck,
    NotebookImpactedWorkloadsCheck,
    RayImpactedWorkloadsCheck,
)
from odhlint.core.check.registry import CheckRegistry


def build_registry() -> CheckRegistry:
    """Construct a registry holding every shipped check."""
    registry = CheckRegistry()
    registry.register_all(
        # components
        CodeFlareRemovalCheck(),
        ModelMeshRemovalCheck(),
        KServeServerlessRemovalCheck(),
        KueueConfigMapManagedCheck(),
        TrainingOperatorDeprecationCheck(),
        # services
        ServiceMeshRemovalCheck(),
        # dependencies
        CertManagerInstalledCheck(),
        KueueOperatorInstalledCheck(),
        ServiceMeshOperator2UpgradeCheck(),
        # workloads
        NotebookImpactedWorkloadsCheck(),
        RayImpactedWorkloadsCheck(),
        KServeImpactedWorkloadsCheck(),
    )
    return registry


__all__ = ["build_registry"]
