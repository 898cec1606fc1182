"""
CLI command: ``odhlint lint``.

Thin wrapper over ``odhlint.core.use_cases.lint``.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
from pydantic import ValidationError

from odhlint.ui.cli.render import EXIT_ERROR, exit_code, render_json, render_table, render_yaml


@click.command("lint")
@click.option("--target-version", default=None, help="Version to check upgrade readiness against.")
@click.option("--checks", "checks_pattern", default=None, help="Check selector (e.g. '*', 'components', '*kserve*').")
@click.option("--exclude", multiple=True, help="Check ID or glob to skip (repeatable).")
@click.option(
    "--output", "-o",
    type=click.Choice(["table", "json", "yaml"]),
    default=None,
    help="Output format.",
)
@click.option("--workers", type=int, default=None, help="Checks to run in parallel.")
@click.option("--timeout", type=float, default=None, help="Per-request timeout in seconds.")
@click.option(
    "--snapshot",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Lint a captured cluster snapshot (YAML/JSON) instead of a live cluster.",
)
@click.option("--context", "kube_context", default=None, help="kubeconfig context to use.")
@click.option("--kubeconfig", default=None, help="Path to the kubeconfig file.")
@click.option("--show-skipped", is_flag=True, help="List checks that did not apply.")
@click.pass_context
def lint(
    ctx: click.Context,
    target_version: str | None,
    checks_pattern: str | None,
    exclude: tuple[str, ...],
    output: str | None,
    workers: int | None,
    timeout: float | None,
    snapshot: Path | None,
    kube_context: str | None,
    kubeconfig: str | None,
    show_skipped: bool,
) -> None:
    """Check the cluster for issues, or for upgrade readiness with --target-version."""
    from odhlint.adapters.base import Reader
    from odhlint.adapters.kubectl import KubectlReader
    from odhlint.adapters.snapshot import SnapshotError, SnapshotReader
    from odhlint.core.check.errors import InvalidPatternError
    from odhlint.core.config.loader import ConfigError, LintConfig, load_config
    from odhlint.core.models.target import IOStreams
    from odhlint.core.run_context import RunContext
    from odhlint.core.use_cases.lint import LintError, run_lint

    try:
        config = load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(EXIT_ERROR)

    overrides = {
        "target_version": target_version,
        "checks": checks_pattern,
        "output": output,
        "workers": workers,
        "timeout": timeout,
    }
    data = config.model_dump()
    data.update({k: v for k, v in overrides.items() if v is not None})
    if exclude:
        data["exclude"] = list(data["exclude"]) + list(exclude)
    if kube_context:
        data["kubectl"]["context"] = kube_context
    if kubeconfig:
        data["kubectl"]["kubeconfig"] = kubeconfig

    try:
        config = LintConfig.model_validate(data)
    except ValidationError as e:
        click.secho(f"❌ Invalid options: {e}", fg="red", err=True)
        sys.exit(EXIT_ERROR)

    reader: Reader
    if snapshot is not None:
        try:
            reader = SnapshotReader.from_file(snapshot)
        except SnapshotError as e:
            click.secho(f"❌ {e}", fg="red", err=True)
            sys.exit(EXIT_ERROR)
    else:
        reader = KubectlReader(
            context=config.kubectl.context,
            kubeconfig=config.kubectl.kubeconfig,
            timeout=config.timeout,
        )

    debug = ctx.obj.get("debug", False)
    try:
        report = run_lint(
            reader,
            config,
            ctx=RunContext(),
            io=IOStreams(),
            debug=debug,
        )
    except (LintError, InvalidPatternError) as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(EXIT_ERROR)

    if config.output == "json":
        click.echo(render_json(report))
    elif config.output == "yaml":
        click.echo(render_yaml(report), nl=False)
    else:
        render_table(report, verbose=ctx.obj.get("verbose", False), show_skipped=show_skipped)

    sys.exit(exit_code(report))
