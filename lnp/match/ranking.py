"""Candidate ranking for the pairing engine.

This module builds, for each SLNB record, the ordered list of ELND candidates
the assignment resolver works through. Scores are computed once per record
and reused across all pairings.
"""

from __future__ import annotations
from typing import Dict, List, Sequence

from ..models import Record, RatioTable, VariableSchema
from .scoring import Candidate, compute_score, make_candidate

RankedList = List[Candidate]


def _rank_key(candidate: Candidate):
    # Closest score first; on equal difference prefer identical variables
    return (candidate.difference, not candidate.perfect)


class RankingEngine:
    """Helper for producing deterministically ordered candidate lists.

    Example usage:
        engine = RankingEngine(schema, table)

        # One SLNB record against the whole ELND pool
        ranked = engine.rank(slnb_record, elnd_records)

        # Every usable SLNB record, capped to the SLNB pool size
        ranked_by_id = engine.rank_all(slnb_records, elnd_records)
    """

    def __init__(self, schema: VariableSchema, table: RatioTable):
        self.schema = schema
        self.table = table
        self._score_cache: Dict[tuple, float] = {}

    def score(self, record: Record) -> float:
        """Risk score of a record, memoized per (cohort, id)."""
        key = (record.cohort, record.id)
        if key not in self._score_cache:
            self._score_cache[key] = compute_score(record, self.table, self.schema)
        return self._score_cache[key]

    def rank(self, slnb_record: Record, elnd_pool: Sequence[Record], cap: int | None = None) -> RankedList:
        """Rank every usable ELND record against one SLNB record.

        Discarded ELND records are excluded. Sorting is stable, so candidates
        with equal difference and equal perfect flag keep pool order.

        Args:
            slnb_record: The SLNB record being paired
            elnd_pool: All ELND records (discarded ones are skipped)
            cap: Optional maximum number of candidates to keep

        Returns:
            Candidates ascending by difference, perfect matches first on ties
        """
        slnb_score = self.score(slnb_record)
        candidates = [
            make_candidate(
                slnb_record,
                elnd,
                self.table,
                self.schema,
                slnb_score=slnb_score,
                elnd_score=self.score(elnd),
            )
            for elnd in elnd_pool
            if not elnd.discard
        ]
        candidates.sort(key=_rank_key)
        if cap is not None:
            return candidates[:cap]
        return candidates

    def rank_all(self, slnb_pool: Sequence[Record], elnd_pool: Sequence[Record]) -> Dict[int, RankedList]:
        """Rank all usable SLNB records.

        Discarded SLNB records receive no list. Each list is capped at the
        number of usable SLNB records: a conflict among N records never needs
        more than N alternatives per record.

        Returns:
            Mapping of SLNB id -> ranked candidate list, in ascending SLNB id order
        """
        usable = sorted((r for r in slnb_pool if not r.discard), key=lambda r: r.id)
        cap = len(usable)
        return {record.id: self.rank(record, elnd_pool, cap=cap) for record in usable}


__all__ = ["RankedList", "RankingEngine"]
