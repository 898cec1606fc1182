"""
Workload checks: live user resources affected by an upgrade.

Each check lists one kind through the workload protocol, which
handles CRD absence, the impacted-count annotation and default
impacted-object references.
"""

from __future__ import annotations

from typing import Any

from odhlint.core import validate
from odhlint.core.check import BaseCheck, CheckGroup, CheckMetadata, CheckType, new_condition
from odhlint.core.check.render_registry import default_object_renderer, renderers
from odhlint.core.check.version_gate import major_minor_label, upgrade_from_2x_to_3x
from odhlint.core.models.resource import (
    INFERENCE_SERVICE,
    NOTEBOOK,
    RAY_CLUSTER,
    PartialObjectMetadata,
)
from odhlint.core.models.result import (
    Condition,
    ConditionType,
    Impact,
    ImpactedObject,
    Reason,
    Status,
)
from odhlint.core.models.target import Target
from odhlint.core.run_context import RunContext
from odhlint.core.validate import WorkloadRequest

FINALIZER_CODEFLARE_OAUTH = "ray.openshift.ai/oauth-finalizer"
ANNOTATION_RAY_BACKUP = "odh.ray.io/pre-upgrade-backup-taken"
ANNOTATION_DEPLOYMENT_MODE = "serving.kserve.io/deploymentMode"

DEPLOYMENT_MODE_SERVERLESS = "Serverless"
DEPLOYMENT_MODE_MODELMESH = "ModelMesh"


class NotebookImpactedWorkloadsCheck(BaseCheck):
    METADATA = CheckMetadata(
        id="workloads.notebook.impacted-workloads",
        name="Workloads :: Notebook :: Impacted Workloads (3.x)",
        description="Lists Notebook (workbench) instances that will be impacted in 3.x",
        group=CheckGroup.WORKLOAD,
        kind="notebook",
        check_type=CheckType.IMPACTED_WORKLOADS,
        remediation="Stop running workbenches and back up their data before upgrading",
    )

    def can_apply(self, ctx: RunContext, target: Target) -> bool:
        return upgrade_from_2x_to_3x(target.current_version, target.target_version)

    def validate(self, ctx: RunContext, target: Target):
        return (
            validate.workloads_metadata(self, target, NOTEBOOK)
            .complete(ctx, self._conditions)
        )

    def _conditions(
        self, ctx: RunContext, req: WorkloadRequest[PartialObjectMetadata],
    ) -> list[Condition]:
        label = major_minor_label(req.target.target_version)
        if not req.items:
            return [new_condition(
                ConditionType.COMPATIBLE, Status.TRUE, Reason.VERSION_COMPATIBLE,
                "No Notebooks found; ready for release %s", label,
            )]
        return [new_condition(
            ConditionType.COMPATIBLE, Status.FALSE, Reason.WORKLOADS_IMPACTED,
            "Found %d Notebook(s) that will be impacted by the upgrade to release %s",
            len(req.items), label,
            impact=Impact.ADVISORY,
            remediation=self.remediation,
        )]


class RayImpactedWorkloadsCheck(BaseCheck):
    """CodeFlare-managed RayClusters (identified by the OAuth finalizer)."""

    METADATA = CheckMetadata(
        id="workloads.ray.impacted-workloads",
        name="Workloads :: Ray :: Impacted Workloads (3.x)",
        description=(
            "Lists RayClusters managed by CodeFlare that will be impacted in 3.x "
            "(CodeFlare not available)"
        ),
        group=CheckGroup.WORKLOAD,
        kind="ray",
        check_type=CheckType.IMPACTED_WORKLOADS,
        remediation=(
            "Delete or back up CodeFlare-managed RayClusters before upgrading, "
            "as CodeFlare will not be available in 3.x"
        ),
    )

    def can_apply(self, ctx: RunContext, target: Target) -> bool:
        return upgrade_from_2x_to_3x(target.current_version, target.target_version)

    def validate(self, ctx: RunContext, target: Target):
        return (
            validate.workloads_metadata(self, target, RAY_CLUSTER)
            .filter(lambda rc: FINALIZER_CODEFLARE_OAUTH in rc.finalizers)
            .run(ctx, self._check_clusters)
        )

    def _check_clusters(
        self, ctx: RunContext, req: WorkloadRequest[PartialObjectMetadata],
    ) -> None:
        label = major_minor_label(req.target.target_version)
        total = len(req.items)
        backed_up = sum(1 for rc in req.items if rc.annotations.get(ANNOTATION_RAY_BACKUP))

        if total == 0:
            req.result.set_condition(new_condition(
                ConditionType.COMPATIBLE, Status.TRUE, Reason.VERSION_COMPATIBLE,
                "No CodeFlare-managed RayCluster(s) found; ready for release %s", label,
            ))
        elif backed_up == total:
            req.result.set_condition(new_condition(
                ConditionType.COMPATIBLE, Status.TRUE, Reason.VERSION_COMPATIBLE,
                "All %d CodeFlare-managed RayCluster(s) have completed pre-upgrade steps",
                total,
            ))
        else:
            req.result.set_condition(new_condition(
                ConditionType.COMPATIBLE, Status.FALSE, Reason.WORKLOADS_IMPACTED,
                "Found %d CodeFlare-managed RayCluster(s) without completed pre-upgrade steps, "
                "not ready for release %s",
                total - backed_up, label,
                impact=Impact.ADVISORY,
                remediation=self.remediation,
            ))

        # Keep the backup annotation on each reference so renderers can show per-cluster status.
        req.result.impacted_objects = [
            ImpactedObject(
                api_version=RAY_CLUSTER.api_version,
                kind=RAY_CLUSTER.kind,
                namespace=rc.namespace,
                name=rc.name,
                annotations={
                    k: v for k, v in rc.annotations.items() if k == ANNOTATION_RAY_BACKUP
                },
            )
            for rc in req.items
        ]


def render_ray_cluster(obj: ImpactedObject) -> str:
    """Default line plus the pre-upgrade backup status of the cluster."""
    status = "backup taken" if obj.annotations.get(ANNOTATION_RAY_BACKUP) else "backup pending"
    return f"{default_object_renderer(obj)} [{status}]"


renderers.register_object_renderer(
    CheckGroup.WORKLOAD, "ray", CheckType.IMPACTED_WORKLOADS, render_ray_cluster,
)


def _deployment_mode(isvc: dict[str, Any]) -> str:
    annotations = (isvc.get("metadata") or {}).get("annotations") or {}
    return annotations.get(ANNOTATION_DEPLOYMENT_MODE, "")


class KServeImpactedWorkloadsCheck(BaseCheck):
    """InferenceServices on deployment modes that 3.x drops.

    Serverless and ModelMesh are reported as separate conditions.
    """

    METADATA = CheckMetadata(
        id="workloads.kserve.impacted-workloads",
        name="Workloads :: KServe :: Impacted Workloads (3.x)",
        description=(
            "Lists InferenceServices using deprecated deployment modes (ModelMesh, Serverless) "
            "that will be impacted in 3.x"
        ),
        group=CheckGroup.WORKLOAD,
        kind="kserve",
        check_type=CheckType.IMPACTED_WORKLOADS,
        remediation="Redeploy affected InferenceServices in RawDeployment mode before upgrading",
    )

    def can_apply(self, ctx: RunContext, target: Target) -> bool:
        return upgrade_from_2x_to_3x(target.current_version, target.target_version)

    def validate(self, ctx: RunContext, target: Target):
        return (
            validate.workloads(self, target, INFERENCE_SERVICE)
            .filter(lambda isvc: _deployment_mode(isvc) in (
                DEPLOYMENT_MODE_SERVERLESS, DEPLOYMENT_MODE_MODELMESH,
            ))
            .complete(ctx, self._conditions)
        )

    def _conditions(
        self, ctx: RunContext, req: WorkloadRequest[dict[str, Any]],
    ) -> list[Condition]:
        label = major_minor_label(req.target.target_version)
        return [
            self._mode_condition(req.items, DEPLOYMENT_MODE_SERVERLESS, label),
            self._mode_condition(req.items, DEPLOYMENT_MODE_MODELMESH, label),
        ]

    def _mode_condition(self, items: list[dict[str, Any]], mode: str, label: str) -> Condition:
        count = sum(1 for isvc in items if _deployment_mode(isvc) == mode)
        if count == 0:
            return new_condition(
                ConditionType.COMPATIBLE, Status.TRUE, Reason.VERSION_COMPATIBLE,
                "No InferenceServices use %s mode", mode,
            )
        return new_condition(
            ConditionType.COMPATIBLE, Status.FALSE, Reason.WORKLOADS_IMPACTED,
            "Found %d InferenceService(s) using %s mode, which is removed in release %s",
            count, mode, label,
            impact=Impact.ADVISORY,
            remediation=self.remediation,
        )
