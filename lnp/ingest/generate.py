"""Random sample dataset generation for trying the pipeline end to end."""

from __future__ import annotations
import csv
import logging
import random
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List

from ..models import VariableSchema
from .csv_import import expected_header

logger = logging.getLogger(__name__)

_EPOCH_START = datetime(2001, 9, 9, tzinfo=timezone.utc)
_EPOCH_SPAN_DAYS = 365 * 19


def generate_rows(schema: VariableSchema, rng: random.Random, count: int) -> List[List[str]]:
    """Build ``count`` data rows with codes drawn from each variable's domain.

    ELND rows are twice as likely as SLNB rows so the ELND pool usually
    covers the SLNB pool.
    """
    rows: List[List[str]] = []
    for _ in range(count):
        surgery = _EPOCH_START + timedelta(days=rng.randint(0, _EPOCH_SPAN_DAYS))
        codes = [str(rng.choice(var.codes)) if var.codes else "" for var in schema]
        is_slnb = rng.randint(0, 2) == 0
        rows.append([
            str(rng.randint(1, 2)),
            surgery.date().isoformat(),
            *codes,
            "1" if is_slnb else "0",
            "0" if is_slnb else "1",
        ])
    return rows


def write_sample_csv(
    path: Path,
    schema: VariableSchema,
    min_rows: int = 100,
    max_rows: int = 200,
    seed: int | None = None,
) -> int:
    """Write a random dataset to ``path``.

    Returns:
        Number of data rows written

    Raises:
        FileExistsError: If ``path`` already exists (never overwrites a dataset)
    """
    if path.exists():
        raise FileExistsError(f"The file '{path}' already exists. Move or delete it and try again.")
    rng = random.Random(seed)
    count = rng.randint(min_rows, max_rows)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open('w', encoding='utf-8', newline='') as fh:
        writer = csv.writer(fh)
        writer.writerow(expected_header(schema))
        writer.writerows(generate_rows(schema, rng, count))
    logger.debug(f"[generate] wrote {count} rows to {path}")
    return count


__all__ = ["generate_rows", "write_sample_csv"]
