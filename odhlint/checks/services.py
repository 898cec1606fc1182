"""Service checks: platform-wide services configured on DSCInitialization."""

from __future__ import annotations

from odhlint.core import validate
from odhlint.core.check import BaseCheck, CheckError, CheckGroup, CheckMetadata, CheckType
from odhlint.core.check import ManagementState, new_condition
from odhlint.core.check.fieldpath import FieldNotFoundError, FieldPathError, query_string
from odhlint.core.check.version_gate import major_minor_label, upgrade_from_2x_to_3x
from odhlint.core.models.result import ConditionType, Impact, Reason, Status
from odhlint.core.models.target import Target
from odhlint.core.run_context import RunContext


class ServiceMeshRemovalCheck(BaseCheck):
    METADATA = CheckMetadata(
        id="services.servicemesh.removal",
        name="Services :: ServiceMesh :: Removal (3.x)",
        description=(
            "Validates that ServiceMesh is disabled before upgrading from 2.x to 3.x "
            "(service mesh will be removed)"
        ),
        group=CheckGroup.SERVICE,
        kind="servicemesh",
        check_type=CheckType.REMOVAL,
        remediation=(
            "Disable ServiceMesh by setting managementState to 'Removed' in the "
            "DSCInitialization before upgrading"
        ),
    )

    def can_apply(self, ctx: RunContext, target: Target) -> bool:
        return upgrade_from_2x_to_3x(target.current_version, target.target_version)

    def validate(self, ctx: RunContext, target: Target):
        label = major_minor_label(target.target_version)

        def _check(result, dsci) -> None:
            try:
                state = query_string(dsci, ".spec.serviceMesh.managementState")
            except FieldNotFoundError:
                result.set_condition(new_condition(
                    ConditionType.CONFIGURED, Status.TRUE, Reason.REQUIREMENTS_MET,
                    "ServiceMesh is not configured; ready for release %s", label,
                ))
                return
            except FieldPathError as e:
                raise CheckError(f"querying servicemesh managementState: {e}") from e

            if state in (ManagementState.MANAGED, ManagementState.UNMANAGED):
                result.set_condition(new_condition(
                    ConditionType.COMPATIBLE, Status.FALSE, Reason.VERSION_INCOMPATIBLE,
                    "ServiceMesh is enabled (state: %s) but will be removed in release %s",
                    state, label,
                    impact=Impact.BLOCKING,
                    remediation=self.remediation,
                ))
            else:
                result.set_condition(new_condition(
                    ConditionType.COMPATIBLE, Status.TRUE, Reason.VERSION_COMPATIBLE,
                    "ServiceMesh is disabled (state: %s); ready for release %s", state, label,
                ))

        return validate.platform(self, target).run(ctx, _check)
