"""Configuration loading for lymph-node-pairing.

Layers, lowest precedence first: built-in defaults, a ``.env`` file in the
working directory, ``LNP__SECTION__KEY`` environment variables, and explicit
overrides passed by the caller (CLI options, tests).
"""
from __future__ import annotations
import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping

logger = logging.getLogger(__name__)

ENV_PREFIX = "LNP__"

_DEFAULTS: Dict[str, Any] = {
    "log_level": "INFO",
    "data": {
        "input_csv": "data/input/dataset.csv",
        "slnb_json": "data/input/slnb.json",
        "elnd_json": "data/input/elnd.json",
        "pairings_json": "data/output/pairings.json",
        "pairings_csv": "data/output/pairings.csv",
    },
    "records": {
        "missing_value_threshold": 1,  # max missing cells before a record is discarded
    },
    # Order of names must match the variable columns of the input file
    "variables": {
        "names": ["depth_code", "dysplasia", "perineural", "lvi", "invasive_front_type", "ene"],
        "labels": {
            "depth_code": "Depth Code",
            "dysplasia": "Dysplasia Present",
            "perineural": "Perineural",
            "lvi": "LVI",
            "invasive_front_type": "Invasive Front Type",
            "ene": "ENE",
        },
        "codes": {
            "depth_code": [1, 2, 3],
            "dysplasia": [0, 1],
            "perineural": [0, 1],
            "lvi": [0, 1],
            "invasive_front_type": [1, 2],
            "ene": [0, 1],
        },
        "disabled": [],
    },
    # Hazard ratio per input code; codes not listed contribute 0
    "ratios": {
        "depth_code": {"3": 2.6, "2": 2.1},
        "dysplasia": {"0": 1.6},
        "invasive_front_type": {"2": 1.6},
        "lvi": {"1": 1.6},
        "perineural": {"1": 1.5},
        "ene": {"1": 1.4},
    },
    "matching": {
        "max_iterations": 10000,
        "accept_unconverged": False,
        "progress_interval": 100,
    },
    "generator": {
        "min_rows": 100,
        "max_rows": 200,
        "seed": None,
    },
}


def deep_merge(base: Mapping[str, Any], extra: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a new dict with ``extra`` layered over ``base``.

    Sections present in both as dicts are merged key by key; any other value
    in ``extra`` replaces the one in ``base``.
    """
    merged = dict(base)
    for key, value in extra.items():
        current = merged.get(key)
        if isinstance(value, dict) and isinstance(current, dict):
            value = deep_merge(current, value)
        merged[key] = value
    return merged


def _strip_inline_comment(text: str) -> str:
    quote = None
    for pos, ch in enumerate(text):
        if ch in ("'", '"'):
            if quote is None:
                quote = ch
            elif quote == ch:
                quote = None
        elif ch == '#' and quote is None:
            return text[:pos].rstrip()
    return text


def _unquote(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"'):
        return text[1:-1]
    return text


def read_dotenv(path: Path) -> Dict[str, str]:
    """Parse ``KEY=value`` lines; blank lines and ``#`` comments are ignored."""
    if not path.exists():
        return {}
    entries: Dict[str, str] = {}
    for raw in path.read_text(encoding='utf-8').splitlines():
        line = raw.strip()
        if line.startswith('#') or '=' not in line:
            continue
        key, _, value = line.partition('=')
        key = key.strip()
        if key:
            entries[key] = _unquote(_strip_inline_comment(value.strip()))
    return entries


def _dotenv_enabled() -> bool:
    # Test runs stay deterministic unless a test opts in explicitly
    return bool(os.environ.get('LNP_ENABLE_DOTENV')) or 'PYTEST_CURRENT_TEST' not in os.environ


def _apply_env(cfg: Dict[str, Any], entries: Mapping[str, str]) -> None:
    """Write ``LNP__SECTION__KEY`` entries into ``cfg`` in place."""
    for name, raw in entries.items():
        if not name.startswith(ENV_PREFIX):
            continue
        *sections, leaf = name[len(ENV_PREFIX):].lower().split("__")
        target = cfg
        for section in sections:
            target = target.setdefault(section, {})
        target[leaf] = coerce_scalar(raw)


def load_config(overrides: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """Build the effective configuration dict.

    Environment keys use the ``LNP__SECTION__KEY`` form, e.g.
    ``LNP__MATCHING__MAX_ITERATIONS=500`` or ``LNP__RATIOS__ENE={"1": 1.2}``.
    Real environment variables win over ``.env`` entries. Under pytest the
    ``.env`` file is ignored unless ``LNP_ENABLE_DOTENV=1``.

    Args:
        overrides: Values deep-merged last

    Returns:
        dict: Configuration (see load_typed_config() for the typed form)
    """
    cfg: Dict[str, Any] = copy.deepcopy(_DEFAULTS)
    if _dotenv_enabled():
        _apply_env(cfg, read_dotenv(Path('.env')))
    _apply_env(cfg, os.environ)
    if overrides:
        cfg = deep_merge(cfg, overrides)

    _configure_logging(cfg.get('log_level', 'INFO'))
    return cfg


def load_typed_config(overrides: Dict[str, Any] | None = None):
    """Same as load_config() but returns an AppConfig."""
    from .config_types import AppConfig
    return AppConfig.from_dict(load_config(overrides))


def _configure_logging(level_str: str) -> None:
    """Route all lnp logging to stderr at the configured level, message text only."""
    level = logging.getLevelName(str(level_str).upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format='%(message)s', force=True)


def coerce_scalar(value: str) -> Any:
    """Interpret an environment string as JSON container, bool, None, int or float.

    Anything that does not parse stays a string.
    """
    text = value.strip()
    if text[:1] in ('[', '{') and text[-1:] in (']', '}'):
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            logger.debug(f"Config value {text!r} looks like JSON but does not parse; kept as text")
    flag = text.lower()
    if flag in ("true", "yes"):
        return True
    if flag in ("false", "no"):
        return False
    if flag in ("none", "null"):
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return text


__all__ = ["load_config", "load_typed_config", "deep_merge", "coerce_scalar", "read_dotenv"]
