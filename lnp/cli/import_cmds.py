"""Record import and sample generation commands."""

from __future__ import annotations
import click
import logging
from pathlib import Path

from .helpers import cli, fail
from ..config_types import build_schema
from ..errors import PairingError
from ..ingest.generate import write_sample_csv
from ..services.import_service import run_import
from ..utils.output import count_badge, file_path, section_header, success

logger = logging.getLogger(__name__)


@cli.command(name="import")
@click.option('--input', 'input_path', type=click.Path(dir_okay=False, path_type=Path), default=None,
              help='CSV file to import (default: data.input_csv)')
@click.pass_context
def import_records(ctx: click.Context, input_path: Path | None):
    """Import SLNB and ELND records from the input CSV.

    Records with more missing cells than records.missing_value_threshold
    are kept but flagged as discarded; they never take part in pairing.
    """
    cfg = ctx.obj
    click.echo(section_header("Importing records"))
    try:
        result = run_import(cfg, input_path=input_path)
    except (PairingError, FileNotFoundError) as e:
        fail(ctx, e)
        return
    click.echo(success(
        f"{count_badge(len(result.slnb), 'SLNB')}, {count_badge(len(result.elnd), 'ELND')} "
        f"({result.discarded} discarded, {result.skipped} skipped)"
    ))
    click.echo(file_path(cfg['data']['slnb_json'], 'SLNB records'))
    click.echo(file_path(cfg['data']['elnd_json'], 'ELND records'))


@cli.command()
@click.option('--output', 'output_path', type=click.Path(dir_okay=False, path_type=Path), default=None,
              help='CSV file to create (default: data.input_csv)')
@click.option('--seed', type=int, default=None, help='Random seed for a reproducible dataset')
@click.pass_context
def generate(ctx: click.Context, output_path: Path | None, seed: int | None):
    """Write a random sample dataset. Never overwrites an existing file."""
    cfg = ctx.obj
    gen_cfg = cfg.get('generator', {})
    target = output_path or Path(cfg['data']['input_csv'])
    try:
        count = write_sample_csv(
            target,
            build_schema(cfg),
            min_rows=int(gen_cfg.get('min_rows', 100)),
            max_rows=int(gen_cfg.get('max_rows', 200)),
            seed=seed if seed is not None else gen_cfg.get('seed'),
        )
    except (PairingError, FileExistsError) as e:
        fail(ctx, e)
        return
    click.echo(success(f"Generated {count} rows"))
    click.echo(file_path(target))


__all__ = ["import_records", "generate"]
