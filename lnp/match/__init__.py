"""Matching package exposing scoring, ranking and assignment primitives."""

from .scoring import (
    Candidate,
    compute_score,
    explain,
    is_perfect_match,
    make_candidate,
)
from .ranking import RankingEngine
from .resolver import AssignmentResolver
from .matching_engine import MatchingPipeline, MatchOutcome, MatchStats

__all__ = [
    "Candidate",
    "compute_score",
    "explain",
    "is_perfect_match",
    "make_candidate",
    "RankingEngine",
    "AssignmentResolver",
    "MatchingPipeline",
    "MatchOutcome",
    "MatchStats",
]
