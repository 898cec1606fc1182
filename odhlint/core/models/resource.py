"""
Resource descriptors and lightweight object views.

``ResourceType`` names a Kubernetes kind (group/version/kind/plural).
Full objects travel as the plain dicts kubectl returns; listings that
only need identity use ``PartialObjectMetadata``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ResourceType:
    """A Kubernetes kind together with its plural resource name."""

    group: str
    version: str
    kind: str
    resource: str

    @property
    def api_version(self) -> str:
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"

    @property
    def list_kind(self) -> str:
        return f"{self.kind}List"

    @property
    def kubectl_name(self) -> str:
        """Fully-qualified name accepted by ``kubectl get`` (``plural.version.group``)."""
        if not self.group:
            return self.resource
        return f"{self.resource}.{self.version}.{self.group}"

    def type_meta(self) -> dict[str, str]:
        return {"apiVersion": self.api_version, "kind": self.kind}

    def __str__(self) -> str:
        return f"{self.kind}.{self.api_version}"


@dataclass(frozen=True)
class NamespacedName:
    namespace: str
    name: str

    def __str__(self) -> str:
        if not self.namespace:
            return self.name
        return f"{self.namespace}/{self.name}"


@dataclass
class PartialObjectMetadata:
    """Metadata-only projection of a live object."""

    api_version: str = ""
    kind: str = ""
    name: str = ""
    namespace: str = ""
    uid: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    finalizers: list[str] = field(default_factory=list)
    owner_references: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_object(cls, obj: dict[str, Any]) -> PartialObjectMetadata:
        meta = obj.get("metadata") or {}
        return cls(
            api_version=obj.get("apiVersion", ""),
            kind=obj.get("kind", ""),
            name=meta.get("name", ""),
            namespace=meta.get("namespace", ""),
            uid=meta.get("uid", ""),
            labels=dict(meta.get("labels") or {}),
            annotations=dict(meta.get("annotations") or {}),
            finalizers=list(meta.get("finalizers") or []),
            owner_references=list(meta.get("ownerReferences") or []),
        )

    def to_dict(self) -> dict[str, Any]:
        meta: dict[str, Any] = {"name": self.name}
        if self.namespace:
            meta["namespace"] = self.namespace
        if self.uid:
            meta["uid"] = self.uid
        if self.labels:
            meta["labels"] = dict(self.labels)
        if self.annotations:
            meta["annotations"] = dict(self.annotations)
        if self.finalizers:
            meta["finalizers"] = list(self.finalizers)
        return {"apiVersion": self.api_version, "kind": self.kind, "metadata": meta}


@dataclass(frozen=True)
class Subscription:
    """The fields of an OLM Subscription the lint framework reads."""

    name: str
    namespace: str = ""
    package: str = ""
    channel: str = ""
    installed_csv: str = ""
    current_csv: str = ""

    @classmethod
    def from_object(cls, obj: dict[str, Any]) -> Subscription:
        meta = obj.get("metadata") or {}
        spec = obj.get("spec") or {}
        status = obj.get("status") or {}
        return cls(
            name=meta.get("name", ""),
            namespace=meta.get("namespace", ""),
            package=spec.get("name", ""),
            channel=spec.get("channel", "") or "",
            installed_csv=status.get("installedCSV", "") or "",
            current_csv=status.get("currentCSV", "") or "",
        )

    @property
    def installed_version(self) -> str:
        return self.installed_csv


def object_name(obj: dict[str, Any] | PartialObjectMetadata) -> NamespacedName:
    """Namespace/name of a full object dict or a metadata projection."""
    if isinstance(obj, PartialObjectMetadata):
        return NamespacedName(obj.namespace, obj.name)
    meta = obj.get("metadata") or {}
    return NamespacedName(meta.get("namespace", ""), meta.get("name", ""))


# ═══════════════════════════════════════════════════════════════════
#  Known resource types
# ═══════════════════════════════════════════════════════════════════


DATA_SCIENCE_CLUSTER = ResourceType(
    "datasciencecluster.opendatahub.io", "v1", "DataScienceCluster", "datascienceclusters",
)
DSC_INITIALIZATION = ResourceType(
    "dscinitialization.opendatahub.io", "v1", "DSCInitialization", "dscinitializations",
)

CONFIG_MAP = ResourceType("", "v1", "ConfigMap", "configmaps")

SUBSCRIPTION = ResourceType(
    "operators.coreos.com", "v1alpha1", "Subscription", "subscriptions",
)
CLUSTER_SERVICE_VERSION = ResourceType(
    "operators.coreos.com", "v1alpha1", "ClusterServiceVersion", "clusterserviceversions",
)

NOTEBOOK = ResourceType("kubeflow.org", "v1", "Notebook", "notebooks")
RAY_CLUSTER = ResourceType("ray.io", "v1", "RayCluster", "rayclusters")
INFERENCE_SERVICE = ResourceType(
    "serving.kserve.io", "v1beta1", "InferenceService", "inferenceservices",
)
