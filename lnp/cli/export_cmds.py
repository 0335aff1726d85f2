"""Pairing export command."""

from __future__ import annotations
import click
from pathlib import Path

from .helpers import cli, fail
from ..errors import PairingError
from ..services.export_service import run_export
from ..utils.output import file_path, section_header, success


@cli.command()
@click.option('--output', 'output_path', type=click.Path(dir_okay=False, path_type=Path), default=None,
              help='CSV file to write (default: data.pairings_csv)')
@click.pass_context
def export(ctx: click.Context, output_path: Path | None):
    """Export all records with their pairings and hazard calculations to CSV."""
    cfg = ctx.obj
    click.echo(section_header("Exporting pairings"))
    try:
        target = run_export(cfg, output_path=output_path)
    except (PairingError, FileNotFoundError) as e:
        fail(ctx, e)
        return
    click.echo(success("Export complete"))
    click.echo(file_path(target))


__all__ = ["export"]
