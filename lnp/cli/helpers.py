from __future__ import annotations
import logging
import click

from ..config import load_typed_config, _configure_logging
from ..utils.output import error
from ..version import __version__

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="lymph-node-pairing")
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              default=None, help='Logging level (overrides config)')
@click.option('--progress-interval', type=int, default=None,
              help='Log resolver progress every N passes, 0 to disable (overrides config)')
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, progress_interval: int | None):
    """Pair SLNB and ELND case records by hazard-ratio risk score.

    \b
    TYPICAL WORKFLOW:
      lnp generate     # (optional) write a random sample dataset
      lnp import       # CSV -> data/input/slnb.json + elnd.json
      lnp match        # pair records -> data/output/pairings.json
      lnp export       # pairings -> data/output/pairings.csv
    \b
    Or run all three steps at once:
      lnp build

    \b
    Configuration comes from defaults, .env and LNP__SECTION__KEY
    environment variables, e.g. LNP__MATCHING__MAX_ITERATIONS=500.
    Use `lnp config` to show the effective settings.
    """
    if not isinstance(ctx.obj, dict):
        ctx.obj = load_typed_config().to_dict()

    if log_level is not None:
        ctx.obj['log_level'] = log_level.upper()
        _configure_logging(ctx.obj['log_level'])
    if progress_interval is not None:
        ctx.obj.setdefault('matching', {})['progress_interval'] = progress_interval


def fail(ctx: click.Context, exc: Exception) -> None:
    """Report a pairing/IO failure and exit with status 1."""
    logger.debug("Command failed", exc_info=exc)
    click.echo(error(f"{type(exc).__name__}: {exc}"), err=True)
    ctx.exit(1)


__all__ = ["cli", "fail"]
