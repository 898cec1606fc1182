"""
Per-run check target.

Built once by the orchestrator and passed to every ``can_apply`` and
``validate`` call. Frozen, so concurrent checks can share it.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TextIO

from odhlint.core.models.version import SemVer

if TYPE_CHECKING:
    from odhlint.adapters.base import Reader


@dataclass(frozen=True)
class IOStreams:
    """User-facing output streams for checks that print progress."""

    out: TextIO = field(default_factory=lambda: sys.stdout)
    err: TextIO = field(default_factory=lambda: sys.stderr)


@dataclass(frozen=True)
class Target:
    """Everything a check needs to know about the cluster it runs against."""

    client: Reader
    current_version: SemVer | None = None
    target_version: SemVer | None = None
    io: IOStreams | None = None
    debug: bool = False
