"""
Tests for the shipped checks: applicability and outcomes against
snapshots shaped like real 2.x clusters.
"""

import pytest

from odhlint.adapters.snapshot import SnapshotReader
from odhlint.checks import build_registry
from odhlint.checks.components import (
    ANNOTATION_MANAGED,
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
    ANNOTATION_DEPLOYMENT_MODE,
    ANNOTATION_RAY_BACKUP,
    FINALIZER_CODEFLARE_OAUTH,
    KServeImpactedWorkloadsCheck,
    NotebookImpactedWorkloadsCheck,
    RayImpactedWorkloadsCheck,
)
from odhlint.core.check.constants import GROUP_SHORTCUTS
from odhlint.core.models.resource import CONFIG_MAP, NOTEBOOK, RAY_CLUSTER
from odhlint.core.models.result import ConditionType, Impact, Reason, Status


def _single(result):
    assert len(result.conditions) == 1
    return result.conditions[0]


# ═══════════════════════════════════════════════════════════════════
#  Registry
# ═══════════════════════════════════════════════════════════════════


class TestBuildRegistry:
    def test_all_checks_registered(self):
        registry = build_registry()
        assert len(registry) == 12
        ids = [c.id for c in registry.all()]
        assert ids[0] == "components.codeflare.removal"
        assert ids[-1] == "workloads.kserve.impacted-workloads"

    def test_ids_prefixed_by_group(self):
        for check in build_registry().all():
            prefix = check.id.split(".")[0]
            assert GROUP_SHORTCUTS[prefix] == check.group
            assert check.description

    def test_groups(self):
        registry = build_registry()
        assert len(registry.select("components")) == 5
        assert len(registry.select("services")) == 1
        assert len(registry.select("dependencies")) == 3
        assert len(registry.select("workloads")) == 3


# ═══════════════════════════════════════════════════════════════════
#  Applicability
# ═══════════════════════════════════════════════════════════════════


class TestApplicability:
    UPGRADE_CHECKS = [
        CodeFlareRemovalCheck,
        ModelMeshRemovalCheck,
        KServeServerlessRemovalCheck,
        KueueConfigMapManagedCheck,
        ServiceMeshRemovalCheck,
        ServiceMeshOperator2UpgradeCheck,
        NotebookImpactedWorkloadsCheck,
        RayImpactedWorkloadsCheck,
        KServeImpactedWorkloadsCheck,
    ]

    @pytest.mark.parametrize("check_cls", UPGRADE_CHECKS)
    def test_upgrade_checks_need_2x_to_3x(self, ctx, reader, make_target, check_cls):
        check = check_cls()
        assert check.can_apply(ctx, make_target(reader, "2.17.0", "3.0.0"))
        assert not check.can_apply(ctx, make_target(reader, "2.17.0", "2.17.0"))
        assert not check.can_apply(ctx, make_target(reader, "3.0.0", "3.1.0"))
        assert not check.can_apply(ctx, make_target(reader, None, "3.0.0"))

    def test_deprecation_needs_3_3(self, ctx, reader, make_target):
        check = TrainingOperatorDeprecationCheck()
        assert check.can_apply(ctx, make_target(reader, "3.2.0", "3.3.0"))
        assert not check.can_apply(ctx, make_target(reader, "2.17.0", "3.2.0"))
        assert not check.can_apply(ctx, make_target(reader, "3.3.0", None))

    @pytest.mark.parametrize("check_cls", [CertManagerInstalledCheck, KueueOperatorInstalledCheck])
    def test_installed_checks_always_apply(self, ctx, reader, make_target, check_cls):
        assert check_cls().can_apply(ctx, make_target(reader, None, None))


# ═══════════════════════════════════════════════════════════════════
#  Component checks
# ═══════════════════════════════════════════════════════════════════


class TestRemovalChecks:
    @pytest.mark.parametrize("check_cls,component", [
        (CodeFlareRemovalCheck, "codeflare"),
        (ModelMeshRemovalCheck, "modelmeshserving"),
    ])
    def test_managed_blocks(self, ctx, make_dsc, make_target, check_cls, component):
        reader = SnapshotReader(objects=[make_dsc({component: "Managed"})])
        c = _single(check_cls().validate(ctx, make_target(reader)))
        assert (c.type, c.status, c.reason) == (
            ConditionType.COMPATIBLE, Status.FALSE, Reason.VERSION_INCOMPATIBLE,
        )
        assert c.impact == Impact.BLOCKING
        assert "release 3.0" in c.message
        assert c.remediation

    @pytest.mark.parametrize("state", ["Removed", "Unmanaged", None])
    def test_not_managed_passes(self, ctx, make_dsc, make_target, state):
        components = {"codeflare": state} if state else {}
        reader = SnapshotReader(objects=[make_dsc(components)])
        result = CodeFlareRemovalCheck().validate(ctx, make_target(reader))
        assert _single(result).status == Status.TRUE

    def test_result_identity(self, ctx, make_dsc, make_target):
        reader = SnapshotReader(objects=[make_dsc({"codeflare": "Managed"})])
        result = CodeFlareRemovalCheck().validate(ctx, make_target(reader))
        assert (result.group, result.kind, result.name) == ("component", "codeflare", "removal")
        result.ensure_valid()


class TestKServeServerlessRemoval:
    def _dsc(self, make_dsc, serving_state):
        kserve = {"managementState": "Managed"}
        if serving_state is not None:
            kserve["serving"] = {"managementState": serving_state}
        return make_dsc({"kserve": kserve})

    @pytest.mark.parametrize("serving_state", ["Managed", "Unmanaged"])
    def test_serverless_enabled_blocks(self, ctx, make_dsc, make_target, serving_state):
        reader = SnapshotReader(objects=[self._dsc(make_dsc, serving_state)])
        c = _single(KServeServerlessRemovalCheck().validate(ctx, make_target(reader)))
        assert c.status == Status.FALSE
        assert c.impact == Impact.BLOCKING

    @pytest.mark.parametrize("serving_state", ["Removed", None])
    def test_serverless_disabled_passes(self, ctx, make_dsc, make_target, serving_state):
        reader = SnapshotReader(objects=[self._dsc(make_dsc, serving_state)])
        c = _single(KServeServerlessRemovalCheck().validate(ctx, make_target(reader)))
        assert c.status == Status.TRUE

    def test_kserve_removed_skips(self, ctx, make_dsc, make_target):
        reader = SnapshotReader(objects=[make_dsc({"kserve": "Removed"})])
        c = _single(KServeServerlessRemovalCheck().validate(ctx, make_target(reader)))
        assert c.reason == Reason.REQUIREMENTS_MET


class TestKueueConfigMapManaged:
    def _reader(self, make_dsc, make_dsci, make_object, annotations=None, with_cm=True):
        objects = [make_dsc({"kueue": "Managed"}), make_dsci("opendatahub")]
        if with_cm:
            objects.append(make_object(
                "v1", "ConfigMap", "kueue-manager-config", "opendatahub", annotations=annotations,
            ))
        return SnapshotReader(objects=objects)

    def test_unmanaged_annotation_warns(self, ctx, make_dsc, make_dsci, make_object, make_target):
        reader = self._reader(make_dsc, make_dsci, make_object, {ANNOTATION_MANAGED: "false"})
        c = _single(KueueConfigMapManagedCheck().validate(ctx, make_target(reader)))
        assert (c.status, c.reason) == (Status.FALSE, Reason.CONFIGURATION_UNMANAGED)
        assert c.impact == Impact.ADVISORY

    def test_managed_passes(self, ctx, make_dsc, make_dsci, make_object, make_target):
        reader = self._reader(make_dsc, make_dsci, make_object)
        c = _single(KueueConfigMapManagedCheck().validate(ctx, make_target(reader)))
        assert (c.status, c.reason) == (Status.TRUE, Reason.CONFIGURATION_VALID)

    def test_config_map_absent_passes(self, ctx, make_dsc, make_dsci, make_object, make_target):
        reader = self._reader(make_dsc, make_dsci, make_object, with_cm=False)
        reader.declare(CONFIG_MAP)
        c = _single(KueueConfigMapManagedCheck().validate(ctx, make_target(reader)))
        assert c.status == Status.TRUE


class TestTrainingOperatorDeprecation:
    @pytest.mark.parametrize("state", ["Managed", "Unmanaged"])
    def test_enabled_is_advisory(self, ctx, make_dsc, make_target, state):
        reader = SnapshotReader(objects=[make_dsc({"trainingoperator": state})])
        target = make_target(reader, "3.2.0", "3.3.0")
        c = _single(TrainingOperatorDeprecationCheck().validate(ctx, target))
        assert (c.status, c.reason, c.impact) == (Status.FALSE, Reason.DEPRECATED, Impact.ADVISORY)

    def test_removed_passes(self, ctx, make_dsc, make_target):
        reader = SnapshotReader(objects=[make_dsc({"trainingoperator": "Removed"})])
        c = _single(TrainingOperatorDeprecationCheck().validate(ctx, make_target(reader, "3.2.0", "3.3.0")))
        assert c.status == Status.TRUE


# ═══════════════════════════════════════════════════════════════════
#  Service checks
# ═══════════════════════════════════════════════════════════════════


class TestServiceMeshRemoval:
    @pytest.mark.parametrize("state", ["Managed", "Unmanaged"])
    def test_enabled_blocks(self, ctx, make_dsci, make_target, state):
        reader = SnapshotReader(objects=[make_dsci(service_mesh=state)])
        c = _single(ServiceMeshRemovalCheck().validate(ctx, make_target(reader)))
        assert (c.status, c.impact) == (Status.FALSE, Impact.BLOCKING)

    def test_removed_passes(self, ctx, make_dsci, make_target):
        reader = SnapshotReader(objects=[make_dsci(service_mesh="Removed")])
        assert _single(ServiceMeshRemovalCheck().validate(ctx, make_target(reader))).status == Status.TRUE

    def test_unconfigured_passes(self, ctx, make_dsci, make_target):
        reader = SnapshotReader(objects=[make_dsci()])
        c = _single(ServiceMeshRemovalCheck().validate(ctx, make_target(reader)))
        assert (c.status, c.reason) == (Status.TRUE, Reason.REQUIREMENTS_MET)

    def test_no_dsci(self, ctx, reader, make_target):
        c = _single(ServiceMeshRemovalCheck().validate(ctx, make_target(reader)))
        assert c.reason == Reason.RESOURCE_NOT_FOUND


# ═══════════════════════════════════════════════════════════════════
#  Dependency checks
# ═══════════════════════════════════════════════════════════════════


class TestDependencyChecks:
    def test_cert_manager_found(self, ctx, make_subscription, make_target):
        reader = SnapshotReader(objects=[
            make_subscription("openshift-cert-manager-operator", installed_csv="cert-manager-operator.v1.15.0"),
        ])
        c = _single(CertManagerInstalledCheck().validate(ctx, make_target(reader)))
        assert c.status == Status.TRUE

    def test_kueue_wrong_channel(self, ctx, make_subscription, make_target):
        reader = SnapshotReader(objects=[make_subscription("kueue-operator", channel="alpha")])
        c = _single(KueueOperatorInstalledCheck().validate(ctx, make_target(reader)))
        assert c.status == Status.FALSE

    def test_servicemesh2_present_blocks(self, ctx, make_subscription, make_target):
        reader = SnapshotReader(objects=[
            make_subscription("servicemeshoperator", "stable", "servicemeshoperator.v2.6.5"),
        ])
        c = _single(ServiceMeshOperator2UpgradeCheck().validate(ctx, make_target(reader)))
        assert (c.status, c.impact) == (Status.FALSE, Impact.BLOCKING)
        assert "servicemeshoperator.v2.6.5" in c.message

    def test_servicemesh2_absent_passes(self, ctx, make_subscription, make_target):
        reader = SnapshotReader(objects=[make_subscription("servicemeshoperator3")])
        c = _single(ServiceMeshOperator2UpgradeCheck().validate(ctx, make_target(reader)))
        assert c.status == Status.TRUE


# ═══════════════════════════════════════════════════════════════════
#  Workload checks
# ═══════════════════════════════════════════════════════════════════


class TestNotebookImpacted:
    def test_no_crd(self, ctx, reader, make_target):
        result = NotebookImpactedWorkloadsCheck().validate(ctx, make_target(reader))
        assert _single(result).status == Status.TRUE
        assert result.impacted_objects is None

    def test_notebooks_listed(self, ctx, make_object, make_target):
        reader = SnapshotReader(objects=[
            make_object("kubeflow.org/v1", "Notebook", "wb1", "proj-a"),
            make_object("kubeflow.org/v1", "Notebook", "wb2", "proj-b"),
        ])
        result = NotebookImpactedWorkloadsCheck().validate(ctx, make_target(reader))
        c = _single(result)
        assert (c.status, c.impact) == (Status.FALSE, Impact.ADVISORY)
        assert "Found 2 Notebook(s)" in c.message
        assert [o.name for o in result.impacted_objects] == ["wb1", "wb2"]
        assert reader.call_log == [("list", NOTEBOOK.kind, "")]


class TestRayImpacted:
    def _rc(self, make_object, name, managed=True, backed_up=False):
        return make_object(
            "ray.io/v1", "RayCluster", name, "proj",
            finalizers=[FINALIZER_CODEFLARE_OAUTH] if managed else None,
            annotations={ANNOTATION_RAY_BACKUP: "true"} if backed_up else None,
        )

    def test_only_codeflare_managed_counted(self, ctx, make_object, make_target):
        reader = SnapshotReader(objects=[
            self._rc(make_object, "managed"),
            self._rc(make_object, "plain", managed=False),
        ])
        result = RayImpactedWorkloadsCheck().validate(ctx, make_target(reader))
        assert _single(result).status == Status.FALSE
        assert [o.name for o in result.impacted_objects] == ["managed"]

    def test_all_backed_up_passes(self, ctx, make_object, make_target):
        reader = SnapshotReader(objects=[self._rc(make_object, "rc", backed_up=True)])
        result = RayImpactedWorkloadsCheck().validate(ctx, make_target(reader))
        assert _single(result).status == Status.TRUE
        assert result.impacted_objects[0].annotations == {ANNOTATION_RAY_BACKUP: "true"}

    def test_none_found_sets_empty_list(self, ctx, reader, make_target):
        reader.declare(RAY_CLUSTER)
        result = RayImpactedWorkloadsCheck().validate(ctx, make_target(reader))
        assert _single(result).status == Status.TRUE
        assert result.impacted_objects == []


class TestKServeImpacted:
    def _isvc(self, make_object, name, mode=None):
        annotations = {ANNOTATION_DEPLOYMENT_MODE: mode} if mode else None
        return make_object("serving.kserve.io/v1beta1", "InferenceService", name, "models",
                           annotations=annotations)

    def test_two_conditions(self, ctx, make_object, make_target):
        reader = SnapshotReader(objects=[
            self._isvc(make_object, "a", "Serverless"),
            self._isvc(make_object, "b", "Serverless"),
            self._isvc(make_object, "c", "RawDeployment"),
            self._isvc(make_object, "d"),
        ])
        result = KServeImpactedWorkloadsCheck().validate(ctx, make_target(reader))
        serverless, modelmesh = result.conditions
        assert serverless.status == Status.FALSE
        assert "Found 2 InferenceService(s) using Serverless mode" in serverless.message
        assert modelmesh.status == Status.TRUE
        assert [o.name for o in result.impacted_objects] == ["a", "b"]
        assert not result.has_blocking_failure

    def test_modelmesh(self, ctx, make_object, make_target):
        reader = SnapshotReader(objects=[self._isvc(make_object, "mm", "ModelMesh")])
        serverless, modelmesh = KServeImpactedWorkloadsCheck().validate(ctx, make_target(reader)).conditions
        assert serverless.status == Status.TRUE
        assert modelmesh.status == Status.FALSE
