"""Configuration display and validation."""

from __future__ import annotations
import json

import click

from .helpers import cli, fail
from ..config_types import build_ratio_table, build_schema
from ..errors import ConfigurationError
from ..utils.output import count_badge, success


@cli.command(name="config")
@click.option("--section", "-s", help="Only show one top-level section (e.g. ratios, matching, data).")
@click.option("--check", is_flag=True, help="Validate variables and ratios instead of printing them.")
@click.pass_context
def show_config(ctx: click.Context, section: str | None, check: bool):
    """Show the effective configuration as JSON, or validate it with --check."""
    cfg = ctx.obj
    if check:
        try:
            schema = build_schema(cfg)
            table = build_ratio_table(cfg)
            table.validate(schema)
        except ConfigurationError as e:
            fail(ctx, e)
            return
        disabled = [v.name for v in schema if v.disabled]
        click.echo(success(
            f"{count_badge(len(schema), 'variables')} ({len(disabled)} disabled), "
            f"{count_badge(len(table.ratios), 'ratio entries')}"
        ))
        return

    shown = cfg
    if section:
        key = section.lower()
        if key not in cfg:
            raise click.UsageError(f"Unknown section '{section}'. Available: {', '.join(sorted(cfg))}")
        shown = {key: cfg[key]}
    click.echo(json.dumps(shown, indent=2, sort_keys=True))


__all__ = ["show_config"]
