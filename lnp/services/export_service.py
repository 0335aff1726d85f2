"""Export service: records + pairings -> CSV."""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Dict, Any

from ..config_types import build_ratio_table, build_schema
from ..export.pairings import write_pairings_csv
from ..store import load_pairings, load_records

logger = logging.getLogger(__name__)


def run_export(config: Dict[str, Any], output_path: Path | None = None) -> Path:
    """Write all records with their pairing details to CSV.

    Args:
        config: Full configuration dict
        output_path: Optional CSV path overriding ``data.pairings_csv``

    Returns:
        Path of the written CSV
    """
    data_cfg = config['data']
    schema = build_schema(config)
    table = build_ratio_table(config)

    slnb = load_records(Path(data_cfg['slnb_json']), schema)
    elnd = load_records(Path(data_cfg['elnd_json']), schema)
    pairings = load_pairings(Path(data_cfg['pairings_json']), slnb, elnd)

    target = Path(output_path or data_cfg['pairings_csv'])
    write_pairings_csv(target, slnb + elnd, pairings, table, schema)
    logger.info(f"✓ Exported {len(slnb) + len(elnd)} rows, {len(pairings)} pairings to {target}")
    return target


__all__ = ["run_export"]
