"""
Snapshot reader: an in-memory ``Reader`` over a captured cluster state.

Used for offline linting (``odhlint lint --snapshot FILE``) and as the
test double for every framework test. A snapshot is YAML or JSON:

    olm: true                    # OLM availability (default true)
    resourceTypes:               # kinds served even when no object exists
      - {apiVersion: kubeflow.org/v1, kind: Notebook}
    objects:                     # full objects, any kind
      - apiVersion: datasciencecluster.opendatahub.io/v1
        kind: DataScienceCluster
        metadata: {name: default-dsc}
        ...

A kind with neither objects nor a ``resourceTypes`` entry is treated as
not installed. Errors can be injected per kind.
"""

from __future__ import annotations

import copy
import logging
import threading
from pathlib import Path
from typing import Any

import yaml

from odhlint.adapters.base import (
    NotFoundError,
    OLMReader,
    Reader,
    ResourceTypeNotFoundError,
)
from odhlint.core.models.resource import (
    SUBSCRIPTION,
    PartialObjectMetadata,
    ResourceType,
    Subscription,
)
from odhlint.core.run_context import RunContext

logger = logging.getLogger(__name__)


class SnapshotError(Exception):
    """Raised when a snapshot file cannot be loaded."""


def _type_key(api_version: str, kind: str) -> tuple[str, str]:
    group = api_version.rsplit("/", 1)[0] if "/" in api_version else ""
    return group, kind


class SnapshotReader(Reader):
    """Serves reads from an in-memory list of objects."""

    def __init__(
        self,
        objects: list[dict[str, Any]] | None = None,
        resource_types: list[ResourceType] | None = None,
        olm_available: bool = True,
        reader_name: str = "snapshot",
    ):
        self._name = reader_name
        self._objects: dict[tuple[str, str], list[dict[str, Any]]] = {}
        self._served: set[tuple[str, str]] = set()
        self._errors: dict[tuple[str, str], Exception] = {}
        self._call_log: list[tuple[str, str, str]] = []
        self._lock = threading.Lock()
        self._olm = _SnapshotOLM(self, olm_available)

        for rt in resource_types or []:
            self.declare(rt)
        for obj in objects or []:
            self.add(obj)

    # ── Construction ─────────────────────────────────────────────

    @classmethod
    def from_dict(cls, data: dict[str, Any], reader_name: str = "snapshot") -> SnapshotReader:
        if not isinstance(data, dict):
            raise SnapshotError("snapshot must be a mapping")

        reader = cls(olm_available=bool(data.get("olm", True)), reader_name=reader_name)
        for entry in data.get("resourceTypes") or []:
            api_version = entry.get("apiVersion", "")
            kind = entry.get("kind", "")
            if not api_version or not kind:
                raise SnapshotError(f"resourceTypes entry needs apiVersion and kind: {entry!r}")
            reader._served.add(_type_key(api_version, kind))

        objects = data.get("objects")
        if objects is None and data.get("kind", "").endswith("List"):
            objects = data.get("items")
        for obj in objects or []:
            if not isinstance(obj, dict) or not obj.get("apiVersion") or not obj.get("kind"):
                raise SnapshotError("every snapshot object needs apiVersion and kind")
            reader.add(obj)
        return reader

    @classmethod
    def from_file(cls, path: Path) -> SnapshotReader:
        """Load a YAML or JSON snapshot file."""
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise SnapshotError(f"Cannot read {path}: {e}") from e
        try:
            data = yaml.safe_load(raw) or {}
        except yaml.YAMLError as e:
            raise SnapshotError(f"Invalid YAML in {path}: {e}") from e

        logger.debug("Loaded snapshot from %s", path)
        return cls.from_dict(data, reader_name=f"snapshot:{path.name}")

    # ── Test helpers ─────────────────────────────────────────────

    def add(self, obj: dict[str, Any]) -> None:
        key = _type_key(obj["apiVersion"], obj["kind"])
        self._served.add(key)
        self._objects.setdefault(key, []).append(copy.deepcopy(obj))

    def declare(self, resource_type: ResourceType) -> None:
        """Mark a kind as installed even when no objects exist."""
        self._served.add((resource_type.group, resource_type.kind))

    def set_error(self, resource_type: ResourceType, error: Exception) -> None:
        """Make every read of ``resource_type`` raise ``error``."""
        self._errors[(resource_type.group, resource_type.kind)] = error

    def set_olm_available(self, available: bool) -> None:
        self._olm._available = available

    @property
    def call_log(self) -> list[tuple[str, str, str]]:
        """(operation, kind, name) for every read received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def reset(self) -> None:
        self._call_log.clear()
        self._errors.clear()

    # ── Reader ───────────────────────────────────────────────────

    @property
    def name(self) -> str:
        return self._name

    @property
    def olm(self) -> OLMReader:
        return self._olm

    def _items(
        self,
        ctx: RunContext,
        op: str,
        resource_type: ResourceType,
        name: str = "",
    ) -> list[dict[str, Any]]:
        with self._lock:
            self._call_log.append((op, resource_type.kind, name))
        ctx.check()

        key = (resource_type.group, resource_type.kind)
        if key in self._errors:
            raise self._errors[key]
        if key not in self._served:
            raise ResourceTypeNotFoundError(
                f'the server doesn\'t have a resource type "{resource_type.resource}"'
            )
        return self._objects.get(key, [])

    def get(
        self,
        ctx: RunContext,
        resource_type: ResourceType,
        name: str,
        namespace: str = "",
    ) -> dict[str, Any]:
        for obj in self._items(ctx, "get", resource_type, name):
            meta = obj.get("metadata") or {}
            if meta.get("name") != name:
                continue
            if namespace and meta.get("namespace", "") != namespace:
                continue
            return copy.deepcopy(obj)
        raise NotFoundError(f'{resource_type.resource} "{name}" not found')

    def list(
        self,
        ctx: RunContext,
        resource_type: ResourceType,
        namespace: str = "",
    ) -> list[dict[str, Any]]:
        items = self._items(ctx, "list", resource_type)
        if namespace:
            items = [o for o in items if (o.get("metadata") or {}).get("namespace") == namespace]
        return copy.deepcopy(items)

    def list_metadata(
        self,
        ctx: RunContext,
        resource_type: ResourceType,
        namespace: str = "",
    ) -> list[PartialObjectMetadata]:
        return [
            PartialObjectMetadata.from_object(o)
            for o in self.list(ctx, resource_type, namespace)
        ]


class _SnapshotOLM(OLMReader):
    def __init__(self, reader: SnapshotReader, available: bool):
        self._reader = reader
        self._available = available

    def available(self) -> bool:
        return self._available

    def list_subscriptions(self, ctx: RunContext) -> list[Subscription]:
        try:
            items = self._reader.list(ctx, SUBSCRIPTION)
        except ResourceTypeNotFoundError:
            return []
        return [Subscription.from_object(o) for o in items]
