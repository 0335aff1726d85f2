"""Pytest fixtures shared across the suite.

The ``schema``/``table`` pair is the two-variable toy setup used throughout
the matching tests (age and smoker). ``test_config`` provides the full default
configuration with all data paths isolated to ``tmp_path``.
"""
from __future__ import annotations
from pathlib import Path
from typing import Dict, Any

import pytest

from lnp.config_types import AppConfig
from lnp.match.scoring import Candidate
from lnp.models import Cohort, RatioTable, Record, Variable, VariableSchema


@pytest.fixture
def schema() -> VariableSchema:
    return VariableSchema((
        Variable("age", "Age", (0, 1)),
        Variable("smoker", "Smoker", (0, 1)),
    ))


@pytest.fixture
def table() -> RatioTable:
    return RatioTable({"age": {1: 2.0}, "smoker": {1: 1.5}})


@pytest.fixture
def make_record(schema):
    """Factory: make_record(id, cohort, discard=False, **values)."""
    def _make(id: int, cohort: str = "SLNB", discard: bool = False, **values) -> Record:
        return Record.build(id=id, cohort=cohort, values=values, schema=schema, discard=discard)
    return _make


@pytest.fixture
def make_candidate_stub():
    """Factory for candidates with a fixed difference, for resolver tests.

    Records carry no variable values; only ids and the difference matter.
    """
    def _make(slnb_id: int, elnd_id: int, difference: float, perfect: bool = False) -> Candidate:
        return Candidate(
            slnb=Record(id=slnb_id, cohort=Cohort.SLNB, values=()),
            elnd=Record(id=elnd_id, cohort=Cohort.ELND, values=()),
            slnb_score=0.0,
            elnd_score=difference,
            difference=difference,
            perfect=perfect,
        )
    return _make


@pytest.fixture
def test_config(tmp_path: Path) -> Dict[str, Any]:
    """Default configuration as a dict with data paths under tmp_path.

    Tests should pass this dict to services/CLI directly rather than
    setting environment variables.
    """
    cfg = AppConfig().to_dict()
    cfg['log_level'] = 'DEBUG'
    cfg['data'] = {
        'input_csv': str(tmp_path / 'input' / 'dataset.csv'),
        'slnb_json': str(tmp_path / 'input' / 'slnb.json'),
        'elnd_json': str(tmp_path / 'input' / 'elnd.json'),
        'pairings_json': str(tmp_path / 'output' / 'pairings.json'),
        'pairings_csv': str(tmp_path / 'output' / 'pairings.csv'),
    }
    cfg['matching']['progress_interval'] = 0
    return cfg


CSV_HEADER = (
    "Gender Code,Date of Surgery,Depth Code,Dysplasia Present,Perineural,LVI,"
    "Invasive Front Type,ENE,SLNB,ELND"
)


@pytest.fixture
def write_dataset():
    """Factory writing a CSV in the default column layout; rows are comma strings."""
    def _write(path: Path, rows) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join([CSV_HEADER, *rows]) + "\n", encoding="utf-8")
        return path
    return _write
