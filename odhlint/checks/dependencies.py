"""Dependency checks: third-party operators detected through OLM subscriptions."""

from __future__ import annotations

from odhlint.core import validate
from odhlint.core.check import BaseCheck, CheckGroup, CheckMetadata, CheckType, new_condition
from odhlint.core.check.version_gate import major_minor_label, upgrade_from_2x_to_3x
from odhlint.core.models.result import Condition, ConditionType, Impact, Reason, Status
from odhlint.core.models.target import Target
from odhlint.core.run_context import RunContext


class CertManagerInstalledCheck(BaseCheck):
    METADATA = CheckMetadata(
        id="dependencies.certmanager.installed",
        name="Dependencies :: CertManager :: Installed",
        description="Reports the cert-manager operator installation status and version",
        group=CheckGroup.DEPENDENCY,
        kind="certmanager",
        check_type=CheckType.INSTALLED,
    )

    def can_apply(self, ctx: RunContext, target: Target) -> bool:
        return True

    def validate(self, ctx: RunContext, target: Target):
        return (
            validate.operator(self, target)
            .with_names("cert-manager", "openshift-cert-manager-operator")
            .run(ctx)
        )


class KueueOperatorInstalledCheck(BaseCheck):
    METADATA = CheckMetadata(
        id="dependencies.kueueoperator.installed",
        name="Dependencies :: KueueOperator :: Installed",
        description="Reports the kueue-operator installation status and version",
        group=CheckGroup.DEPENDENCY,
        kind="kueueoperator",
        check_type=CheckType.INSTALLED,
    )

    CHANNELS = ("stable", "stable-v1.0", "stable-v1.1")

    def can_apply(self, ctx: RunContext, target: Target) -> bool:
        return True

    def validate(self, ctx: RunContext, target: Target):
        return (
            validate.operator(self, target)
            .with_names("kueue-operator")
            .with_channels(*self.CHANNELS)
            .run(ctx)
        )


class ServiceMeshOperator2UpgradeCheck(BaseCheck):
    """Service Mesh v2 must be gone before moving to 3.x: finding it is the failure."""

    METADATA = CheckMetadata(
        id="dependencies.servicemeshoperator2.upgrade",
        name="Dependencies :: ServiceMeshOperator2 :: Upgrade (3.x)",
        description=(
            "Validates that servicemeshoperator2 is not installed when upgrading to 3.x "
            "(requires servicemeshoperator3)"
        ),
        group=CheckGroup.DEPENDENCY,
        kind="servicemeshoperator2",
        check_type="upgrade",
        remediation="Uninstall servicemeshoperator2 and install servicemeshoperator3 before upgrading",
    )

    def can_apply(self, ctx: RunContext, target: Target) -> bool:
        return upgrade_from_2x_to_3x(target.current_version, target.target_version)

    def validate(self, ctx: RunContext, target: Target):
        label = major_minor_label(target.target_version)

        def _condition(found: bool, version: str) -> Condition:
            if not found:
                return new_condition(
                    ConditionType.COMPATIBLE, Status.TRUE, Reason.VERSION_COMPATIBLE,
                    "servicemeshoperator2 is not installed; ready for release %s", label,
                )
            return new_condition(
                ConditionType.COMPATIBLE, Status.FALSE, Reason.VERSION_INCOMPATIBLE,
                "servicemeshoperator2 is installed (%s) but not supported in release %s, "
                "which requires servicemeshoperator3",
                version, label,
                impact=Impact.BLOCKING,
                remediation=self.remediation,
            )

        return (
            validate.operator(self, target)
            .with_names("servicemeshoperator")
            .with_channels("stable", "v2.x")
            .with_condition_builder(_condition)
            .run(ctx)
        )
