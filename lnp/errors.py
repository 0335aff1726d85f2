"""Error taxonomy for the pairing engine.

Every failure the engine can surface derives from :class:`PairingError` so the
CLI can report them uniformly. None of them are retried internally.
"""
from __future__ import annotations
from typing import Sequence, Tuple, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .match.scoring import Candidate


class PairingError(Exception):
    """Base class for all pairing failures."""


class ConfigurationError(PairingError):
    """Variable schema, ratio table or input columns are inconsistent."""


class InsufficientPoolError(PairingError):
    """Fewer usable ELND records than usable SLNB records."""

    def __init__(self, slnb_count: int, elnd_count: int):
        self.slnb_count = slnb_count
        self.elnd_count = elnd_count
        super().__init__(
            f"Cannot pair {slnb_count} SLNB record(s) with only {elnd_count} ELND record(s); "
            "a complete 1:1 assignment is impossible"
        )


class ResolutionExhaustedError(PairingError):
    """A conflict band ran out of ranked alternatives for every trial."""

    def __init__(self, elnd_id: int, slnb_ids: Sequence[int]):
        self.elnd_id = elnd_id
        self.slnb_ids = tuple(slnb_ids)
        super().__init__(
            f"Conflict on ELND:{elnd_id} cannot be resolved; SLNB records "
            f"{', '.join(str(i) for i in self.slnb_ids)} have no further alternatives"
        )


class ConvergenceLimitError(PairingError):
    """Repair loop hit its iteration budget before reaching a conflict-free assignment.

    ``last_assignment`` holds the last attempted (possibly still conflicted)
    state ordered by SLNB id, so callers can decide to accept or abort.
    """

    def __init__(self, iterations: int, last_assignment: Tuple["Candidate", ...]):
        self.iterations = iterations
        self.last_assignment = last_assignment
        super().__init__(f"Conflict resolution did not converge within {iterations} pass(es)")


__all__ = [
    "PairingError",
    "ConfigurationError",
    "InsufficientPoolError",
    "ResolutionExhaustedError",
    "ConvergenceLimitError",
]
