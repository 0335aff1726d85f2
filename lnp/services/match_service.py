"""Match service: load records, run the pairing pipeline, persist pairings."""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Dict, Any, Tuple

from ..config_types import build_matching_config, build_ratio_table, build_schema
from ..errors import ConvergenceLimitError
from ..match.matching_engine import MatchingPipeline, MatchStats, summarize
from ..match.scoring import Candidate
from ..store import load_records, save_pairings

logger = logging.getLogger(__name__)


class MatchResult:
    """Results from a match operation."""

    def __init__(self):
        self.slnb_records = 0
        self.elnd_records = 0
        self.assignment: Tuple[Candidate, ...] = ()
        self.stats: MatchStats | None = None
        self.converged = True
        self.pairings_path: Path | None = None


def run_matching(config: Dict[str, Any]) -> MatchResult:
    """Pair imported SLNB records with ELND records and write pairings JSON.

    If the resolver runs out of its iteration budget the error propagates,
    unless ``matching.accept_unconverged`` is set, in which case the last
    attempted assignment is written and flagged as not converged.

    Args:
        config: Full configuration dict

    Returns:
        MatchResult with the assignment and statistics
    """
    result = MatchResult()
    data_cfg = config['data']
    schema = build_schema(config)
    table = build_ratio_table(config)
    matching_config = build_matching_config(config)

    slnb = load_records(Path(data_cfg['slnb_json']), schema)
    elnd = load_records(Path(data_cfg['elnd_json']), schema)
    result.slnb_records = len(slnb)
    result.elnd_records = len(elnd)

    pipeline = MatchingPipeline(schema, table, matching_config)
    try:
        outcome = pipeline.run(slnb, elnd)
        result.assignment = outcome.assignment
        result.stats = outcome.stats
    except ConvergenceLimitError as e:
        if not matching_config.accept_unconverged:
            raise
        logger.warning(f"⚠ {e}; keeping last attempted assignment (may contain conflicts)")
        result.assignment = e.last_assignment
        result.stats = summarize(e.last_assignment, iterations=e.iterations)
        result.converged = False

    result.pairings_path = save_pairings(Path(data_cfg['pairings_json']), result.assignment, table, schema)
    logger.debug(f"Pairings written to {result.pairings_path}")
    return result


__all__ = ["MatchResult", "run_matching"]
