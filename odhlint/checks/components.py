"""
Component checks: platform components whose lifecycle changes between releases.

Every check here runs through the component protocol, so the
DataScienceCluster lookup, state gating and annotations are shared.
Applicability is decided on versions only; state gating happens in
``validate`` via ``in_state``.
"""

from __future__ import annotations

from odhlint.adapters.base import NotFoundError, ReaderError
from odhlint.core import validate
from odhlint.core.check import BaseCheck, CheckError, CheckGroup, CheckMetadata, CheckType
from odhlint.core.check import ManagementState, new_condition
from odhlint.core.check.fieldpath import FieldNotFoundError, FieldPathError, query_string
from odhlint.core.check.version_gate import at_least, major_minor_label, upgrade_from_2x_to_3x
from odhlint.core.models.resource import CONFIG_MAP
from odhlint.core.models.result import ConditionType, Impact, Reason, Status
from odhlint.core.models.target import Target
from odhlint.core.run_context import RunContext
from odhlint.core.validate import ComponentRequest

ANNOTATION_MANAGED = "opendatahub.io/managed"


class CodeFlareRemovalCheck(BaseCheck):
    METADATA = CheckMetadata(
        id="components.codeflare.removal",
        name="Components :: CodeFlare :: Removal (3.x)",
        description=(
            "Validates that CodeFlare is disabled before upgrading from 2.x to 3.x "
            "(component will be removed)"
        ),
        group=CheckGroup.COMPONENT,
        kind="codeflare",
        check_type=CheckType.REMOVAL,
        remediation=(
            "Disable CodeFlare by setting managementState to 'Removed' in the "
            "DataScienceCluster before upgrading"
        ),
    )

    def can_apply(self, ctx: RunContext, target: Target) -> bool:
        return upgrade_from_2x_to_3x(target.current_version, target.target_version)

    def validate(self, ctx: RunContext, target: Target):
        return (
            validate.component(self, target)
            .in_state(ManagementState.MANAGED)
            .run(ctx, validate.removal(
                "CodeFlare is enabled (state: %s) but will be removed in release %s",
                impact=Impact.BLOCKING,
                remediation=self.remediation,
            ))
        )


class ModelMeshRemovalCheck(BaseCheck):
    METADATA = CheckMetadata(
        id="components.modelmesh.removal",
        name="Components :: ModelMesh :: Removal (3.x)",
        description=(
            "Validates that ModelMesh serving is disabled before upgrading from 2.x to 3.x "
            "(component will be removed)"
        ),
        group=CheckGroup.COMPONENT,
        kind="modelmeshserving",
        check_type=CheckType.REMOVAL,
        remediation=(
            "Migrate ModelMesh models to KServe raw deployments and set modelmeshserving "
            "managementState to 'Removed' before upgrading"
        ),
    )

    def can_apply(self, ctx: RunContext, target: Target) -> bool:
        return upgrade_from_2x_to_3x(target.current_version, target.target_version)

    def validate(self, ctx: RunContext, target: Target):
        return (
            validate.component(self, target)
            .in_state(ManagementState.MANAGED)
            .run(ctx, validate.removal(
                "ModelMesh serving is enabled (state: %s) but will be removed in release %s",
                impact=Impact.BLOCKING,
                remediation=self.remediation,
            ))
        )


class KServeServerlessRemovalCheck(BaseCheck):
    METADATA = CheckMetadata(
        id="components.kserve.serverless-removal",
        name="Components :: KServe :: Serverless Removal (3.x)",
        description=(
            "Validates that KServe serverless mode is disabled before upgrading from 2.x to 3.x "
            "(serverless support will be removed)"
        ),
        group=CheckGroup.COMPONENT,
        kind="kserve",
        check_type="serverless-removal",
        remediation=(
            "Disable KServe serverless mode by setting serving.managementState to 'Removed' "
            "in the DataScienceCluster before upgrading"
        ),
    )

    def can_apply(self, ctx: RunContext, target: Target) -> bool:
        return upgrade_from_2x_to_3x(target.current_version, target.target_version)

    def validate(self, ctx: RunContext, target: Target):
        return (
            validate.component(self, target)
            .in_state(ManagementState.MANAGED)
            .run(ctx, self._check_serving)
        )

    def _check_serving(self, ctx: RunContext, req: ComponentRequest) -> None:
        label = major_minor_label(req.target_version)
        try:
            state = query_string(req.dsc, ".spec.components.kserve.serving.managementState")
        except FieldNotFoundError:
            req.result.set_condition(new_condition(
                ConditionType.COMPATIBLE, Status.TRUE, Reason.VERSION_COMPATIBLE,
                "KServe serverless mode is not configured; ready for release %s", label,
            ))
            return
        except FieldPathError as e:
            raise CheckError(f"querying kserve serving managementState: {e}") from e

        if state in (ManagementState.MANAGED, ManagementState.UNMANAGED):
            req.result.set_condition(new_condition(
                ConditionType.COMPATIBLE, Status.FALSE, Reason.VERSION_INCOMPATIBLE,
                "KServe serverless mode is enabled (state: %s) but will be removed in release %s",
                state, label,
                impact=Impact.BLOCKING,
                remediation=self.remediation,
            ))
        else:
            req.result.set_condition(new_condition(
                ConditionType.COMPATIBLE, Status.TRUE, Reason.VERSION_COMPATIBLE,
                "KServe serverless mode is disabled (state: %s); ready for release %s",
                state, label,
            ))


class KueueConfigMapManagedCheck(BaseCheck):
    """Warns when the Kueue manager ConfigMap is pinned as unmanaged."""

    CONFIG_MAP_NAME = "kueue-manager-config"

    METADATA = CheckMetadata(
        id="components.kueue.configmap-managed",
        name="Components :: Kueue :: ConfigMap Managed Check (3.x)",
        description=(
            "Validates that the kueue-manager-config ConfigMap is managed by the operator "
            "before upgrading from 2.x to 3.x"
        ),
        group=CheckGroup.COMPONENT,
        kind="kueue",
        check_type=CheckType.CONFIG_MIGRATION,
        remediation=(
            f"Remove the annotation {ANNOTATION_MANAGED}=false from the kueue-manager-config "
            "ConfigMap, or back up your custom configuration to re-apply after the upgrade"
        ),
    )

    def can_apply(self, ctx: RunContext, target: Target) -> bool:
        return upgrade_from_2x_to_3x(target.current_version, target.target_version)

    def validate(self, ctx: RunContext, target: Target):
        return (
            validate.component(self, target)
            .in_state(ManagementState.MANAGED)
            .with_applications_namespace()
            .run(ctx, self._check_config_map)
        )

    def _check_config_map(self, ctx: RunContext, req: ComponentRequest) -> None:
        ns, name = req.applications_namespace, self.CONFIG_MAP_NAME
        try:
            cm = req.client.get(ctx, CONFIG_MAP, name, namespace=ns)
        except NotFoundError:
            req.result.set_condition(new_condition(
                ConditionType.CONFIGURED, Status.TRUE, Reason.CONFIGURATION_VALID,
                "ConfigMap %s/%s not found; no action required", ns, name,
            ))
            return
        except ReaderError as e:
            raise CheckError(f"getting ConfigMap {ns}/{name}: {e}") from e

        annotations = (cm.get("metadata") or {}).get("annotations") or {}
        if annotations.get(ANNOTATION_MANAGED, "").lower() == "false":
            req.result.set_condition(new_condition(
                ConditionType.CONFIGURED, Status.FALSE, Reason.CONFIGURATION_UNMANAGED,
                "ConfigMap %s/%s has annotation %s=false; the upgrade will not update it "
                "and it may drift from operator defaults",
                ns, name, ANNOTATION_MANAGED,
                impact=Impact.ADVISORY,
                remediation=self.remediation,
            ))
        else:
            req.result.set_condition(new_condition(
                ConditionType.CONFIGURED, Status.TRUE, Reason.CONFIGURATION_VALID,
                "ConfigMap %s/%s is managed by the operator", ns, name,
            ))


class TrainingOperatorDeprecationCheck(BaseCheck):
    METADATA = CheckMetadata(
        id="components.trainingoperator.deprecation",
        name="Components :: TrainingOperator :: Deprecation (3.3+)",
        description=(
            "Reports that the Kubeflow Training Operator v1 is deprecated and will be "
            "replaced by Trainer v2"
        ),
        group=CheckGroup.COMPONENT,
        kind="trainingoperator",
        check_type=CheckType.DEPRECATION,
        remediation="Plan the migration of training jobs to Trainer v2",
    )

    def can_apply(self, ctx: RunContext, target: Target) -> bool:
        return at_least(target.target_version, 3, 3)

    def validate(self, ctx: RunContext, target: Target):
        return (
            validate.component(self, target)
            .in_state(ManagementState.MANAGED, ManagementState.UNMANAGED)
            .complete(ctx, lambda ctx, req: [new_condition(
                ConditionType.COMPATIBLE, Status.FALSE, Reason.DEPRECATED,
                "TrainingOperator is enabled (state: %s) but is deprecated in release 3.3 "
                "and will be replaced by Trainer v2",
                req.management_state,
                impact=Impact.ADVISORY,
                remediation=self.remediation,
            )])
        )
