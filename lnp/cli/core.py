"""Core CLI module - build command chaining the pipeline steps.

Command modules are organized by functionality:
- import_cmds: CSV import and sample generation
- match_cmds: Pairing engine
- export_cmds: CSV export
- config_cmds: Configuration display
"""

from __future__ import annotations
import click
import logging

from .helpers import cli

# Import command modules to register commands with cli group
from . import import_cmds
from . import match_cmds
from . import export_cmds

logger = logging.getLogger(__name__)


@cli.command(name="build")
@click.option("--no-export", is_flag=True, help="Skip CSV export step")
@click.pass_context
def build(ctx: click.Context, no_export: bool):
    """Run the full pipeline (import -> match -> export)."""
    ctx.invoke(import_cmds.import_records, input_path=None)
    ctx.invoke(match_cmds.match, max_iterations=None, accept_unconverged=False, show_pairs=False)
    if not no_export:
        ctx.invoke(export_cmds.export, output_path=None)
    click.echo("Build complete")
