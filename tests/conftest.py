"""
Shared test fixtures and configuration.

Every framework test runs against a ``SnapshotReader``: no kubectl,
no cluster, no network.
"""

from pathlib import Path

import pytest

from odhlint.adapters.snapshot import SnapshotReader
from odhlint.core.models.target import Target
from odhlint.core.models.version import SemVer
from odhlint.core.run_context import RunContext


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def ctx() -> RunContext:
    return RunContext()


@pytest.fixture
def make_dsc():
    """Factory for DataScienceCluster objects.

    ``components`` maps component name → managementState, or → a full
    component dict when more than the state is needed.
    """
    def _make(components=None, release_version="2.17.0", name="default-dsc"):
        spec_components = {}
        for comp, value in (components or {}).items():
            spec_components[comp] = value if isinstance(value, dict) else {"managementState": value}
        obj = {
            "apiVersion": "datasciencecluster.opendatahub.io/v1",
            "kind": "DataScienceCluster",
            "metadata": {"name": name},
            "spec": {"components": spec_components},
        }
        if release_version:
            obj["status"] = {"release": {"name": "Open Data Hub", "version": release_version}}
        return obj
    return _make


@pytest.fixture
def make_dsci():
    """Factory for DSCInitialization objects."""
    def _make(applications_namespace="opendatahub", service_mesh=None, release_version=None,
              name="default-dsci"):
        spec = {}
        if applications_namespace is not None:
            spec["applicationsNamespace"] = applications_namespace
        if service_mesh is not None:
            spec["serviceMesh"] = {"managementState": service_mesh}
        obj = {
            "apiVersion": "dscinitialization.opendatahub.io/v1",
            "kind": "DSCInitialization",
            "metadata": {"name": name},
            "spec": spec,
        }
        if release_version:
            obj["status"] = {"release": {"version": release_version}}
        return obj
    return _make


@pytest.fixture
def make_subscription():
    """Factory for OLM Subscription objects."""
    def _make(name, channel="stable", installed_csv="", namespace="openshift-operators"):
        obj = {
            "apiVersion": "operators.coreos.com/v1alpha1",
            "kind": "Subscription",
            "metadata": {"name": name, "namespace": namespace},
            "spec": {"name": name, "channel": channel},
        }
        if installed_csv:
            obj["status"] = {"installedCSV": installed_csv, "currentCSV": installed_csv}
        return obj
    return _make


@pytest.fixture
def make_object():
    """Factory for arbitrary namespaced objects."""
    def _make(api_version, kind, name, namespace="default", annotations=None, finalizers=None,
              **extra):
        meta = {"name": name, "namespace": namespace}
        if annotations:
            meta["annotations"] = dict(annotations)
        if finalizers:
            meta["finalizers"] = list(finalizers)
        obj = {"apiVersion": api_version, "kind": kind, "metadata": meta}
        obj.update(extra)
        return obj
    return _make


@pytest.fixture
def make_target():
    """Factory for Targets; versions are strings or None."""
    def _make(reader, current="2.17.0", target="3.0.0"):
        return Target(
            client=reader,
            current_version=SemVer.parse(current) if current else None,
            target_version=SemVer.parse(target) if target else None,
        )
    return _make


@pytest.fixture
def reader() -> SnapshotReader:
    """An empty snapshot: nothing installed, OLM available."""
    return SnapshotReader()
