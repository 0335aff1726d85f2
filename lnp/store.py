"""JSON persistence for imported records and computed pairings.

Records are written per cohort (``slnb.json`` / ``elnd.json``). Pairings are
written as a flat list of id/score rows; loading them resolves ids back to
the records they refer to.
"""
from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import List, Sequence, Dict, Any

from .errors import PairingError
from .models import Record, RatioTable, VariableSchema
from .match.scoring import Candidate, explain

logger = logging.getLogger(__name__)


def save_records(path: Path, records: Sequence[Record]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps([r.to_dict() for r in records], indent=2), encoding='utf-8')
    logger.debug(f"[store] wrote {len(records)} record(s) to {path}")
    return path


def load_records(path: Path, schema: VariableSchema) -> List[Record]:
    """Load records, reordering variable values by schema."""
    if not path.exists():
        raise FileNotFoundError(f"Records file not found: {path}. Run 'lnp import' first.")
    data = json.loads(path.read_text(encoding='utf-8'))
    return [Record.from_dict(row, schema) for row in data]


def save_pairings(
    path: Path,
    assignment: Sequence[Candidate],
    table: RatioTable,
    schema: VariableSchema,
) -> Path:
    """Write pairings with hazard explanations for both members."""
    rows: List[Dict[str, Any]] = []
    for candidate in assignment:
        row = candidate.to_dict()
        row["slnb_explanation"] = explain(candidate.slnb, table, schema)
        row["elnd_explanation"] = explain(candidate.elnd, table, schema)
        rows.append(row)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(rows, indent=2), encoding='utf-8')
    logger.debug(f"[store] wrote {len(rows)} pairing(s) to {path}")
    return path


def load_pairings(path: Path, slnb_records: Sequence[Record], elnd_records: Sequence[Record]) -> List[Candidate]:
    """Load pairings and reattach their records.

    Raises:
        PairingError: If a pairing references a record id that is not loaded
    """
    if not path.exists():
        raise FileNotFoundError(f"Pairings file not found: {path}. Run 'lnp match' first.")
    slnb_by_id = {r.id: r for r in slnb_records}
    elnd_by_id = {r.id: r for r in elnd_records}
    pairings: List[Candidate] = []
    for row in json.loads(path.read_text(encoding='utf-8')):
        slnb = slnb_by_id.get(row["slnb_id"])
        elnd = elnd_by_id.get(row["elnd_id"])
        if slnb is None or elnd is None:
            raise PairingError(
                f"Pairing SLNB:{row['slnb_id']}<->ELND:{row['elnd_id']} references an unknown record; "
                "re-run 'lnp match' after importing"
            )
        pairings.append(Candidate(
            slnb=slnb,
            elnd=elnd,
            slnb_score=float(row["slnb_score"]),
            elnd_score=float(row["elnd_score"]),
            difference=float(row["difference"]),
            perfect=bool(row["perfect"]),
        ))
    return pairings


__all__ = ["save_records", "load_records", "save_pairings", "load_pairings"]
