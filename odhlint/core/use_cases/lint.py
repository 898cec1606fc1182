"""
Lint use case: detect versions, build the target, run the selected checks.

Two modes:
    lint     no target version; the cluster is checked against itself
    upgrade  target version given; upgrade-scoped checks become applicable
"""

from __future__ import annotations

import logging

from odhlint.adapters.base import Reader, ReaderError
from odhlint.checks import build_registry
from odhlint.core.check.errors import CheckError
from odhlint.core.check.registry import CheckRegistry
from odhlint.core.config.loader import LintConfig
from odhlint.core.engine.executor import Executor, LintReport
from odhlint.core.models.target import IOStreams, Target
from odhlint.core.models.version import SemVer
from odhlint.core.run_context import RunContext
from odhlint.core.services.version_detect import ClusterVersion, detect_cluster_version

logger = logging.getLogger(__name__)


class LintError(Exception):
    """The run could not start (for example the cluster version is unreadable)."""


def build_target(
    ctx: RunContext,
    reader: Reader,
    config: LintConfig,
    io: IOStreams | None = None,
    debug: bool = False,
) -> tuple[Target, ClusterVersion | None]:
    """Detect the cluster version and assemble the run's Target."""
    try:
        detected = detect_cluster_version(ctx, reader)
    except (ReaderError, CheckError) as e:
        raise LintError(f"detecting cluster version: {e}") from e

    current = detected.semver if detected else None
    if detected is None:
        logger.warning("Could not detect the cluster version; version-gated checks will be skipped")
    elif current is None:
        logger.warning("Cluster version %r is not a semantic version", detected.version)

    if config.target_version:
        target_version = SemVer.parse(config.target_version)
    else:
        target_version = current

    target = Target(
        client=reader,
        current_version=current,
        target_version=target_version,
        io=io,
        debug=debug,
    )
    return target, detected


def run_lint(
    reader: Reader,
    config: LintConfig,
    ctx: RunContext | None = None,
    registry: CheckRegistry | None = None,
    io: IOStreams | None = None,
    debug: bool = False,
) -> LintReport:
    """Run every selected check against the cluster behind ``reader``.

    Raises:
        LintError: If the run cannot start.
        InvalidPatternError: If the check selection is unusable.
    """
    if ctx is None:
        ctx = RunContext()
    if registry is None:
        registry = build_registry()

    target, detected = build_target(ctx, reader, config, io=io, debug=debug)
    logger.info(
        "Linting with %s reader (current=%s, target=%s)",
        reader.name, target.current_version, target.target_version,
    )

    executor = Executor(registry, workers=config.workers)
    report = executor.execute_selective(ctx, target, config.checks, config.exclude)
    if detected is not None and report.cluster_version is None:
        report.cluster_version = detected.version
    return report
