"""
Impacted-object renderers for verbose table output.

Checks may register how their impacted objects are displayed:

    object renderer  formats one ImpactedObject as a single line
    group renderer   formats the whole list (grouping, sorting, caps)

Both are keyed by (group, kind, check_type). A group renderer takes
precedence over an object renderer registered for the same key.
"""

from __future__ import annotations

import threading
from typing import Callable

from odhlint.core.models.result import ImpactedObject

# Suggested cap on objects listed per check.
DEFAULT_MAX_DISPLAY = 50

ImpactedObjectRenderer = Callable[[ImpactedObject], str]
ImpactedGroupRenderer = Callable[[list[ImpactedObject], int], list[str]]

RendererKey = tuple[str, str, str]


def default_object_renderer(obj: ImpactedObject) -> str:
    """Format as ``namespace/name (Kind)``, or ``name (Kind)`` when cluster-scoped."""
    name = f"{obj.namespace}/{obj.name}" if obj.namespace else obj.name
    return f"{name} ({obj.kind})"


class RendererRegistry:
    """Per-check renderers for impacted objects."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._object_renderers: dict[RendererKey, ImpactedObjectRenderer] = {}
        self._group_renderers: dict[RendererKey, ImpactedGroupRenderer] = {}

    @staticmethod
    def _key(group: str, kind: str, check_type: str) -> RendererKey:
        return (str(group), kind, str(check_type))

    def register_object_renderer(
        self, group: str, kind: str, check_type: str, renderer: ImpactedObjectRenderer,
    ) -> None:
        with self._lock:
            self._object_renderers[self._key(group, kind, check_type)] = renderer

    def register_group_renderer(
        self, group: str, kind: str, check_type: str, renderer: ImpactedGroupRenderer,
    ) -> None:
        with self._lock:
            self._group_renderers[self._key(group, kind, check_type)] = renderer

    def object_renderer(self, group: str, kind: str, check_type: str) -> ImpactedObjectRenderer:
        """The registered per-object renderer, or the default one."""
        with self._lock:
            return self._object_renderers.get(
                self._key(group, kind, check_type), default_object_renderer,
            )

    def group_renderer(self, group: str, kind: str, check_type: str) -> ImpactedGroupRenderer | None:
        with self._lock:
            return self._group_renderers.get(self._key(group, kind, check_type))

    def render(
        self,
        group: str,
        kind: str,
        check_type: str,
        objects: list[ImpactedObject],
        max_display: int = DEFAULT_MAX_DISPLAY,
    ) -> list[str]:
        """Lines to display for ``objects``, capped at ``max_display`` entries."""
        group_renderer = self.group_renderer(group, kind, check_type)
        if group_renderer is not None:
            return group_renderer(objects, max_display)

        renderer = self.object_renderer(group, kind, check_type)
        lines = [renderer(obj) for obj in objects[:max_display]]
        hidden = len(objects) - max_display
        if hidden > 0:
            lines.append(f"... and {hidden} more")
        return lines


# Process-wide registry; checks register at import time.
renderers = RendererRegistry()
