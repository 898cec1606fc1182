"""
Report renderers and exit-code policy.

    table  human-readable, colored via click.secho
    json   LintReport.to_dict() as JSON
    yaml   the same structure as YAML

Exit codes:
    0  nothing blocking
    1  at least one Blocking condition is False
    2  nothing blocking, but at least one check could not be evaluated
"""

from __future__ import annotations

import json

import click
import yaml

from odhlint.core.check.render_registry import renderers
from odhlint.core.engine.executor import CheckExecution, LintReport
from odhlint.core.models.result import Status

EXIT_OK = 0
EXIT_BLOCKING = 1
EXIT_ERROR = 2

_STATUS_STYLE = {
    "pass": ("✅", "green"),
    "fail": ("❌", "red"),
    "error": ("⚠️ ", "yellow"),
    "unknown": ("❔", "yellow"),
    "warn": ("🟡", "yellow"),
    "skipped": ("⏭️ ", "white"),
}


def exit_code(report: LintReport) -> int:
    if report.has_blocking_failure:
        return EXIT_BLOCKING
    if report.errored:
        return EXIT_ERROR
    return EXIT_OK


def render_json(report: LintReport) -> str:
    return json.dumps(report.to_dict(), indent=2)


def render_yaml(report: LintReport) -> str:
    return yaml.safe_dump(report.to_dict(), sort_keys=False, allow_unicode=True)


def _execution_status(execution: CheckExecution) -> str:
    status = execution.status
    # Failures with no Blocking condition read as warnings.
    if status == "fail" and execution.result is not None and not execution.result.has_blocking_failure:
        return "warn"
    return status


def render_table(report: LintReport, verbose: bool = False, show_skipped: bool = False) -> None:
    """Print a human-readable report to stdout."""
    click.secho("\n🔎 ODH Lint", fg="cyan", bold=True)
    click.echo(f"   Cluster version: {report.cluster_version or 'unknown'}")
    click.echo(f"   Target version:  {report.target_version or 'unknown'}")
    click.echo()

    evaluated = [e for e in report.executions if not e.skipped]
    if not evaluated:
        click.secho("   No applicable checks.", fg="yellow")

    for execution in evaluated:
        _render_execution(execution, verbose)

    if show_skipped:
        skipped = [e for e in report.executions if e.skipped]
        if skipped:
            click.secho("\n   Not applicable:", fg="white", bold=True)
            for execution in skipped:
                click.echo(f"     • {execution.check.id}")

    # Framework errors are listed apart from failing conditions.
    errored = [e for e in report.executions if e.errored]
    if errored:
        click.secho("\n   Could not evaluate:", fg="yellow", bold=True)
        for execution in errored:
            click.secho(f"     • {execution.check.id}: {execution.error}", fg="yellow")
            click.echo(f"       💡 {execution.remediation}")

    click.echo()
    summary = (
        f"   {report.total} checks: {report.passed} passed, {report.failed} failing, "
        f"{report.errored} errors, {report.skipped} not applicable"
    )
    if report.has_blocking_failure:
        click.secho(summary, fg="red", bold=True)
        click.secho("   ❌ Blocking issues found", fg="red", bold=True)
    elif report.errored:
        click.secho(summary, fg="yellow", bold=True)
    else:
        click.secho(summary, fg="green", bold=True)
    click.echo()


def _render_execution(execution: CheckExecution, verbose: bool) -> None:
    status = _execution_status(execution)
    icon, color = _STATUS_STYLE.get(status, ("⚠️ ", "yellow"))
    click.secho(f"   {icon} {execution.check.name}", fg=color, bold=status in ("fail", "error"))

    result = execution.result
    if result is None:
        return

    for condition in result.conditions:
        if condition.status == Status.TRUE and not verbose:
            continue
        impact = f" [{condition.impact}]" if condition.impact else ""
        click.echo(f"       {condition.type}={condition.status}{impact}: {condition.message}")
        if condition.remediation and condition.status != Status.TRUE:
            click.echo(f"       💡 {condition.remediation}")

    if verbose and result.impacted_objects:
        click.echo(f"       Impacted objects ({len(result.impacted_objects)}):")
        check = execution.check
        for line in renderers.render(check.group, check.kind, check.check_type, result.impacted_objects):
            click.echo(f"         - {line}")
