"""Matching engine command."""

from __future__ import annotations
import click
import logging

from .helpers import cli, fail
from ..errors import PairingError
from ..services.match_service import run_matching
from ..utils.output import file_path, section_header, success, warning

logger = logging.getLogger(__name__)


@cli.command()
@click.option('--max-iterations', type=int, default=None, help='Repair pass budget (overrides config)')
@click.option('--accept-unconverged', is_flag=True, default=False,
              help='Keep the last attempted assignment if the pass budget runs out')
@click.option('--show-pairs', is_flag=True, help='Print every pairing')
@click.pass_context
def match(ctx: click.Context, max_iterations: int | None, accept_unconverged: bool, show_pairs: bool):
    """Pair every usable SLNB record with a distinct ELND record.

    Each SLNB record starts with its closest ELND record by hazard score;
    conflicts (one ELND record claimed twice) are repaired until every
    pairing is unique.
    """
    cfg = ctx.obj
    matching = cfg.setdefault('matching', {})
    if max_iterations is not None:
        matching['max_iterations'] = max_iterations
    if accept_unconverged:
        matching['accept_unconverged'] = True

    click.echo(section_header("Pairing SLNB and ELND records"))
    try:
        result = run_matching(cfg)
    except (PairingError, FileNotFoundError) as e:
        fail(ctx, e)
        return

    if show_pairs:
        for candidate in result.assignment:
            click.echo(f"  {candidate.describe()}")

    stats = result.stats
    if not result.converged:
        click.echo(warning("Conflict resolution did not converge; pairings may reuse ELND records"))
    click.echo(success(
        f"{stats.perfect} perfect matches, {stats.imperfect} imperfect matches "
        f"(total hazard difference {stats.total_difference:.3f})"
    ))
    click.echo(file_path(result.pairings_path, 'Pairings'))


__all__ = ["match"]
