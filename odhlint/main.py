"""
ODH Lint: CLI entrypoint.

Usage:
    odhlint --help
    odhlint lint
    odhlint lint --target-version 3.0.0
    odhlint checks list
"""

from __future__ import annotations

import os
from pathlib import Path

import click

from odhlint import __version__
from odhlint.core.observability.logging_config import (
    ENV_LOG_FILE,
    ENV_LOG_FILE_LEVEL,
    ENV_LOG_LEVEL,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="odhlint")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to odhlint.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """ODH Lint: diagnose Open Data Hub clusters and upgrade readiness."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get(ENV_LOG_LEVEL, "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get(ENV_LOG_FILE),
        log_file_level=os.environ.get(ENV_LOG_FILE_LEVEL),
        quiet_third_party=not debug,
    )


from odhlint.ui.cli.checks import checks  # noqa: E402
from odhlint.ui.cli.lint import lint  # noqa: E402

cli.add_command(lint)
cli.add_command(checks)


if __name__ == "__main__":
    cli()
