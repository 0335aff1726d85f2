from __future__ import annotations
import csv
import logging
from pathlib import Path
from typing import Dict, List, Sequence

from ..ingest.csv_import import expected_header
from ..match.scoring import Candidate, explain
from ..models import Cohort, Record, RatioTable, VariableSchema

logger = logging.getLogger(__name__)

PAIRING_COLUMNS = ["Hazard calculation", "Discarded", "Paired with", "Hazard difference", "Perfect match"]


def _format_value(value: int | None) -> str:
    return "" if value is None else f"{value:.1f}"


def build_rows(
    records: Sequence[Record],
    pairings: Sequence[Candidate],
    table: RatioTable,
    schema: VariableSchema,
) -> List[List[str]]:
    """One row per record (sorted by id) with its hazard calculation and pairing, if any.

    An ELND record claimed by several SLNB records (unconverged assignment)
    lists every claimant, separated by ``;``.
    """
    by_slnb: Dict[int, Candidate] = {c.slnb_id: c for c in pairings}
    by_elnd: Dict[int, List[Candidate]] = {}
    for c in pairings:
        by_elnd.setdefault(c.elnd_id, []).append(c)

    rows: List[List[str]] = []
    for record in sorted(records, key=lambda r: r.id):
        row = [
            "" if record.gender_code is None else str(record.gender_code),
            record.surgery_date or "",
            *(_format_value(value) for _, value in record.values),
            str(int(record.cohort is Cohort.SLNB)),
            str(int(record.cohort is Cohort.ELND)),
            explain(record, table, schema),
            str(int(record.discard)),
        ]
        if record.cohort is Cohort.SLNB:
            pairing = by_slnb.get(record.id)
            claims = [pairing] if pairing else []
            partners = [c.elnd_id for c in claims]
        else:
            claims = by_elnd.get(record.id, [])
            partners = [c.slnb_id for c in claims]
            if len(claims) > 1:
                # Only an unconverged assignment can pair one ELND record twice
                logger.warning(
                    f"ELND:{record.id} is paired with {len(claims)} SLNB records "
                    f"({', '.join(str(p) for p in partners)}); writing all of them"
                )
        row += [
            ";".join(str(p) for p in partners),
            ";".join(f"{c.difference:.1f}" for c in claims),
            ";".join(str(int(c.perfect)) for c in claims),
        ]
        rows.append(row)
    return rows


def write_pairings_csv(
    path: Path,
    records: Sequence[Record],
    pairings: Sequence[Candidate],
    table: RatioTable,
    schema: VariableSchema,
) -> Path:
    """Write every record with its pairing details to a spreadsheet-friendly CSV.

    Args:
        path: Output CSV path (parent directories are created)
        records: All imported SLNB and ELND records, discarded ones included
        pairings: Final assignment
        table: Ratio table used for the hazard calculation column
        schema: Variable schema (column order)

    Returns:
        Path of the written file
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    rows = build_rows(records, pairings, table, schema)
    with path.open('w', encoding='utf-8', newline='') as fh:
        writer = csv.writer(fh, lineterminator='\r\n')
        writer.writerow(expected_header(schema) + PAIRING_COLUMNS)
        writer.writerows(rows)
    logger.debug(f"[exported] {len(rows)} rows, {len(pairings)} pairings file={path}")
    return path


__all__ = ["PAIRING_COLUMNS", "build_rows", "write_pairings_csv"]
