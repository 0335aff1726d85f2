"""Matching pipeline for SLNB-to-ELND record pairing.

This module provides the pipeline that coordinates ranking and conflict
resolution over full record sets and aggregates the result. It performs no
I/O; the services layer loads records and persists pairings.
"""

from __future__ import annotations
import time
import logging
from dataclasses import dataclass
from typing import Sequence, Tuple

from ..config_types import MatchingConfig
from ..errors import InsufficientPoolError
from ..models import Record, RatioTable, VariableSchema
from .ranking import RankingEngine
from .resolver import AssignmentResolver, sum_differences
from .scoring import Candidate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchStats:
    """Aggregate statistics over a final assignment."""
    perfect: int
    imperfect: int
    total_difference: float
    iterations: int = 0
    duration_seconds: float = 0.0

    @property
    def total(self) -> int:
        return self.perfect + self.imperfect


@dataclass(frozen=True)
class MatchOutcome:
    assignment: Tuple[Candidate, ...]
    stats: MatchStats


def summarize(assignment: Sequence[Candidate], iterations: int = 0, duration_seconds: float = 0.0) -> MatchStats:
    perfect = sum(1 for c in assignment if c.perfect)
    return MatchStats(
        perfect=perfect,
        imperfect=len(assignment) - perfect,
        total_difference=sum_differences(assignment),
        iterations=iterations,
        duration_seconds=duration_seconds,
    )


class MatchingPipeline:
    """Pair every usable SLNB record with a distinct ELND record.

    This class orchestrates one batch run:
    1. Validates the ratio table against the variable schema
    2. Checks that the ELND pool can cover the SLNB pool
    3. Ranks ELND candidates per SLNB record (RankingEngine)
    4. Repairs the greedy assignment until conflict-free (AssignmentResolver)
    5. Returns the assignment by ascending SLNB id plus aggregate statistics

    Example usage:
        pipeline = MatchingPipeline(schema, table, MatchingConfig(max_iterations=500))
        outcome = pipeline.run(slnb_records, elnd_records)
        print(outcome.stats.perfect, outcome.stats.total_difference)
    """

    def __init__(self, schema: VariableSchema, table: RatioTable, matching_config: MatchingConfig | None = None):
        self.schema = schema
        self.table = table
        self.config = matching_config or MatchingConfig()

    def run(self, slnb_records: Sequence[Record], elnd_records: Sequence[Record]) -> MatchOutcome:
        """Run ranking and conflict resolution.

        Raises:
            ConfigurationError: Ratio table references variables outside the schema
            InsufficientPoolError: Fewer usable ELND than usable SLNB records
            ResolutionExhaustedError: A conflict band ran out of alternatives
            ConvergenceLimitError: Iteration budget exhausted before convergence
        """
        start = time.time()
        self.table.validate(self.schema)

        slnb_usable = sum(1 for r in slnb_records if not r.discard)
        elnd_usable = sum(1 for r in elnd_records if not r.discard)
        if elnd_usable < slnb_usable:
            raise InsufficientPoolError(slnb_count=slnb_usable, elnd_count=elnd_usable)

        logger.info(
            f"Pairing {slnb_usable} SLNB record(s) against {elnd_usable} ELND record(s) "
            f"({len(slnb_records) - slnb_usable + len(elnd_records) - elnd_usable} discarded)"
        )

        rank_start = time.time()
        engine = RankingEngine(self.schema, self.table)
        ranked = engine.rank_all(slnb_records, elnd_records)
        logger.info(f"  Compared & sorted candidates in {time.time() - rank_start:.2f}s")

        resolve_start = time.time()
        resolver = AssignmentResolver(
            ranked,
            max_iterations=self.config.max_iterations,
            progress_interval=self.config.progress_interval,
        )
        initial_conflicts = len(resolver.conflicts())
        assignment = resolver.resolve()
        logger.info(
            f"  Resolved {initial_conflicts} initial conflict(s) in {resolver.iterations} pass(es) "
            f"({time.time() - resolve_start:.2f}s)"
        )

        stats = summarize(assignment, iterations=resolver.iterations, duration_seconds=time.time() - start)
        logger.info(
            f"✓ Paired {stats.total} record(s): {stats.perfect} perfect, {stats.imperfect} imperfect, "
            f"total hazard difference {stats.total_difference:.3f} in {stats.duration_seconds:.2f}s"
        )
        return MatchOutcome(assignment=assignment, stats=stats)


__all__ = ["MatchStats", "MatchOutcome", "MatchingPipeline", "summarize"]
