"""
CLI commands for browsing the check catalog.
"""

from __future__ import annotations

import json
import sys

import click


@click.group("checks")
def checks() -> None:
    """Check catalog: list what odhlint can verify."""


@checks.command("list")
@click.option("--checks", "pattern", default="*", help="Check selector (e.g. 'components', '*kserve*').")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def list_checks(pattern: str, as_json: bool) -> None:
    """List registered checks."""
    from odhlint.checks import build_registry
    from odhlint.core.check.errors import InvalidPatternError

    registry = build_registry()
    try:
        selected = registry.select(pattern)
    except InvalidPatternError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(2)

    if as_json:
        click.echo(json.dumps([
            {
                "id": c.id,
                "name": c.name,
                "group": str(c.group),
                "kind": c.kind,
                "type": str(c.check_type),
                "description": c.description,
            }
            for c in selected
        ], indent=2))
        return

    if not selected:
        click.secho(f"No checks match {pattern!r}", fg="yellow")
        return

    click.secho(f"📋 Checks ({len(selected)}):", fg="cyan", bold=True)
    current_group = None
    for c in selected:
        if c.group != current_group:
            current_group = c.group
            click.secho(f"\n   {current_group}", fg="white", bold=True)
        click.echo(f"     • {c.id}")
        click.echo(f"       {c.description}")
    click.echo()
