"""
Shared check vocabulary: groups, check types, management states and
the annotation keys the framework stamps on results.
"""

from __future__ import annotations

from enum import StrEnum


class CheckGroup(StrEnum):
    COMPONENT = "component"
    SERVICE = "service"
    WORKLOAD = "workload"
    DEPENDENCY = "dependency"


# Selector shortcuts → group
GROUP_SHORTCUTS: dict[str, CheckGroup] = {
    "components": CheckGroup.COMPONENT,
    "services": CheckGroup.SERVICE,
    "workloads": CheckGroup.WORKLOAD,
    "dependencies": CheckGroup.DEPENDENCY,
}


class CheckType(StrEnum):
    REMOVAL = "removal"
    INSTALLED = "installed"
    IMPACTED_WORKLOADS = "impacted-workloads"
    CONFIG_MIGRATION = "config-migration"
    DEPRECATION = "deprecation"


class ManagementState(StrEnum):
    MANAGED = "Managed"
    UNMANAGED = "Unmanaged"
    REMOVED = "Removed"


# ── Annotation keys ─────────────────────────────────────────────

ANNOTATION_MANAGEMENT_STATE = "component.opendatahub.io/management-state"
ANNOTATION_TARGET_VERSION = "check.opendatahub.io/target-version"
ANNOTATION_IMPACTED_COUNT = "workload.opendatahub.io/impacted-count"
ANNOTATION_INSTALLED_VERSION = "operator.opendatahub.io/installed-version"
