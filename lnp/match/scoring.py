"""Risk scoring for SLNB/ELND record pairing.

This module computes the hazard-ratio risk score of a record and compares
two records. It does NOT rank or assign anything itself; callers provide the
records, the variable schema and the ratio table.

Design goals:
- Additive scoring in schema order
- Transparent per-variable breakdown for exports and diagnostics
- Keep pure / side-effect free for easy unit testing
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, List, Dict, Any, Tuple

from ..models import Record, RatioTable, VariableSchema

# --- Dataclasses -----------------------------------------------------------

@dataclass(frozen=True)
class Candidate:
    """A possible pairing of one SLNB record with one ELND record."""
    slnb: Record
    elnd: Record
    slnb_score: float
    elnd_score: float
    difference: float
    perfect: bool

    @property
    def slnb_id(self) -> int:
        return self.slnb.id

    @property
    def elnd_id(self) -> int:
        return self.elnd.id

    def describe(self) -> str:
        """Human readable one-liner, e.g. ``SLNB:4<->ELND:9 Hazard ratios: 2.1/2.6 Diff=0.5``."""
        text = (
            f"SLNB:{self.slnb_id}<->ELND:{self.elnd_id} "
            f"Hazard ratios: {self.slnb_score:.1f}/{self.elnd_score:.1f} Diff={self.difference:.1f}"
        )
        return f"{text} (perfect)" if self.perfect else text

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slnb_id": self.slnb_id,
            "elnd_id": self.elnd_id,
            "slnb_score": self.slnb_score,
            "elnd_score": self.elnd_score,
            "difference": self.difference,
            "perfect": self.perfect,
        }

# --- Core Scoring Logic ----------------------------------------------------

def _effective_value(record: Record, variable: str, schema: VariableSchema) -> Optional[int]:
    # Disabled variables behave as missing on every record
    if schema.is_disabled(variable):
        return None
    return record.value(variable)


def score_breakdown(record: Record, table: RatioTable, schema: VariableSchema) -> List[Tuple[str, float]]:
    """Return ``(variable, contribution)`` pairs in schema order."""
    return [
        (var.name, table.ratio(var.name, _effective_value(record, var.name, schema)))
        for var in schema
    ]


def compute_score(record: Record, table: RatioTable, schema: VariableSchema) -> float:
    """Sum of hazard ratios over all declared variables.

    Null values, codes absent from the table and disabled variables add 0.
    """
    total = 0.0
    for _, contribution in score_breakdown(record, table, schema):
        total += contribution
    return total


def explain(record: Record, table: RatioTable, schema: VariableSchema) -> str:
    """Show the score calculation, e.g. ``2.6+0.0+1.5+0.0+0.0+0.0=4.1``."""
    contributions = score_breakdown(record, table, schema)
    total = 0.0
    for _, contribution in contributions:
        total += contribution
    return "+".join(f"{c:.1f}" for _, c in contributions) + f"={total:.1f}"


def is_perfect_match(a: Record, b: Record, schema: VariableSchema) -> bool:
    """True if both records agree on every declared variable (both-null counts as agreement)."""
    return all(
        _effective_value(a, var.name, schema) == _effective_value(b, var.name, schema)
        for var in schema
    )


def make_candidate(
    slnb: Record,
    elnd: Record,
    table: RatioTable,
    schema: VariableSchema,
    slnb_score: Optional[float] = None,
    elnd_score: Optional[float] = None,
) -> Candidate:
    """Build a Candidate; precomputed scores may be passed to avoid recomputation."""
    if slnb_score is None:
        slnb_score = compute_score(slnb, table, schema)
    if elnd_score is None:
        elnd_score = compute_score(elnd, table, schema)
    return Candidate(
        slnb=slnb,
        elnd=elnd,
        slnb_score=slnb_score,
        elnd_score=elnd_score,
        difference=abs(slnb_score - elnd_score),
        perfect=is_perfect_match(slnb, elnd, schema),
    )


__all__ = [
    "Candidate",
    "score_breakdown",
    "compute_score",
    "explain",
    "is_perfect_match",
    "make_candidate",
]
