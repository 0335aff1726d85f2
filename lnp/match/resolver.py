"""Conflict resolution for the greedy SLNB -> ELND assignment.

The resolver starts from every SLNB record's best-ranked candidate and then
repairs conflicts (an ELND record claimed by several SLNB records) one band at
a time until no conflict remains.

Band repair is a depth-one local search: for each band member it tries
"this member keeps its pick, every other member takes its next-ranked
alternative" and keeps the cheapest feasible trial. It does not enumerate all
permutations of alternatives, so for bands larger than two the repair is only
locally optimal.

Every pass moves at least one band member further down its ranked list and no
member ever moves back, so an assignment state can never repeat and the loop
is bounded by the total length of the ranked lists. ``max_iterations`` still
caps the loop for callers that want a tighter budget.
"""

from __future__ import annotations
import logging
import time
from collections import Counter
from typing import Dict, List, Mapping, Optional, Tuple

from ..errors import ConvergenceLimitError, InsufficientPoolError, ResolutionExhaustedError
from .ranking import RankedList
from .scoring import Candidate
from ..utils.logging_helpers import log_progress

logger = logging.getLogger(__name__)


def sum_differences(candidates) -> float:
    """Cumulative score difference of a set of pairings."""
    return sum(c.difference for c in candidates)


class AssignmentResolver:
    """Owns the evolving assignment for one pipeline run.

    Example usage:
        resolver = AssignmentResolver(ranked_lists, max_iterations=1000)
        assignment = resolver.resolve()   # tuple of Candidates by SLNB id
    """

    def __init__(
        self,
        ranked_lists: Mapping[int, RankedList],
        max_iterations: int = 10000,
        progress_interval: int = 0,
    ):
        """Seed the assignment with each ranked list's first candidate.

        Args:
            ranked_lists: SLNB id -> ranked candidates (read-only)
            max_iterations: Repair passes allowed before ConvergenceLimitError
            progress_interval: Log progress every N passes (0 disables)
        """
        self._ranked: Dict[int, RankedList] = {sid: ranked_lists[sid] for sid in sorted(ranked_lists)}
        # Position of each ELND id inside each SLNB record's ranked list
        self._positions: Dict[int, Dict[int, int]] = {
            sid: {c.elnd_id: idx for idx, c in enumerate(ranked)}
            for sid, ranked in self._ranked.items()
        }
        self.max_iterations = max_iterations
        self.progress_interval = progress_interval
        self.iterations = 0
        self._assignment: Dict[int, Candidate] = {}
        self._seed()

    def _seed(self) -> None:
        for sid, ranked in self._ranked.items():
            if not ranked:
                raise InsufficientPoolError(slnb_count=len(self._ranked), elnd_count=0)
            self._assignment[sid] = ranked[0]

    def snapshot(self) -> Tuple[Candidate, ...]:
        """Immutable view of the current assignment ordered by SLNB id."""
        return tuple(self._assignment[sid] for sid in sorted(self._assignment))

    def conflicts(self) -> List[Candidate]:
        """Chosen candidates whose ELND record is claimed more than once, by ascending SLNB id."""
        claims = Counter(c.elnd_id for c in self._assignment.values())
        return [c for c in self.snapshot() if claims[c.elnd_id] > 1]

    def next_alternative(self, candidate: Candidate) -> Optional[Candidate]:
        """Candidate ranked immediately after ``candidate`` for the same SLNB record, if any."""
        ranked = self._ranked[candidate.slnb_id]
        position = self._positions[candidate.slnb_id][candidate.elnd_id]
        if position + 1 < len(ranked):
            return ranked[position + 1]
        return None

    def resolve_band(self, band: List[Candidate]) -> List[Candidate]:
        """Pick the cheapest "one member keeps, the rest move on" trial for a band.

        Ties go to the earliest trial, i.e. the lowest band index keeping its pick.

        Raises:
            ResolutionExhaustedError: If every trial needs an alternative that does not exist
        """
        if len(band) == 1:
            return list(band)

        trials: List[List[Candidate]] = []
        for i, keeper in enumerate(band):
            trial = [keeper]
            for j, other in enumerate(band):
                if j == i:
                    continue
                alternative = self.next_alternative(other)
                if alternative is None:
                    trial = []
                    break
                trial.append(alternative)
            if trial:
                trials.append(trial)

        if not trials:
            raise ResolutionExhaustedError(band[0].elnd_id, [c.slnb_id for c in band])

        best = trials[0]
        best_total = sum_differences(best)
        for trial in trials[1:]:
            total = sum_differences(trial)
            if total < best_total:
                best, best_total = trial, total
        return best

    def step(self) -> bool:
        """Run one repair pass. Returns False when the assignment is already conflict-free.

        Raises:
            ConvergenceLimitError: Conflicts remain but ``max_iterations`` passes already ran
        """
        conflicts = self.conflicts()
        if not conflicts:
            return False
        self._check_budget()
        self._repair(conflicts)
        return True

    def _check_budget(self) -> None:
        if self.iterations >= self.max_iterations:
            raise ConvergenceLimitError(self.iterations, self.snapshot())

    def _repair(self, conflicts: List[Candidate]) -> None:
        band_id = conflicts[0].elnd_id
        band = [c for c in conflicts if c.elnd_id == band_id]
        replacement = self.resolve_band(band)

        for sid in [sid for sid, c in self._assignment.items() if c.elnd_id == band_id]:
            del self._assignment[sid]
        for candidate in replacement:
            self._assignment[candidate.slnb_id] = candidate

        self.iterations += 1
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"Resolved {len(band)} conflicts on ELND:{band_id} -> "
                f"{', '.join(c.describe() for c in replacement)}"
            )

    def resolve(self) -> Tuple[Candidate, ...]:
        """Repair conflicts until none remain.

        Raises:
            ResolutionExhaustedError: A band has no feasible trial
            ConvergenceLimitError: ``max_iterations`` passes ran without converging
        """
        start = time.time()
        while True:
            conflicts = self.conflicts()
            if not conflicts:
                return self.snapshot()
            self._check_budget()
            if self.progress_interval and self.iterations and self.iterations % self.progress_interval == 0:
                log_progress(
                    processed=self.iterations,
                    total=None,
                    remaining=len(conflicts),
                    elapsed_seconds=time.time() - start,
                    item_name="passes",
                )
            self._repair(conflicts)


__all__ = ["AssignmentResolver", "sum_differences"]
