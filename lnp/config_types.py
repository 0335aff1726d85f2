"""Typed configuration dataclasses for lymph-node-pairing.

Provides strongly-typed configuration objects that can be used throughout
the application for better type safety and IDE support.
"""
from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import List, Dict, Any

from .errors import ConfigurationError
from .models import RatioTable, Variable, VariableSchema


def _default_names() -> List[str]:
    return ["depth_code", "dysplasia", "perineural", "lvi", "invasive_front_type", "ene"]


def _default_labels() -> Dict[str, str]:
    return {
        "depth_code": "Depth Code",
        "dysplasia": "Dysplasia Present",
        "perineural": "Perineural",
        "lvi": "LVI",
        "invasive_front_type": "Invasive Front Type",
        "ene": "ENE",
    }


def _default_codes() -> Dict[str, List[int]]:
    return {
        "depth_code": [1, 2, 3],
        "dysplasia": [0, 1],
        "perineural": [0, 1],
        "lvi": [0, 1],
        "invasive_front_type": [1, 2],
        "ene": [0, 1],
    }


def _default_ratios() -> Dict[str, Dict[Any, float]]:
    return {
        "depth_code": {3: 2.6, 2: 2.1},
        "dysplasia": {0: 1.6},
        "invasive_front_type": {2: 1.6},
        "lvi": {1: 1.6},
        "perineural": {1: 1.5},
        "ene": {1: 1.4},
    }


@dataclass
class DataConfig:
    """Input and output file locations."""
    input_csv: str = "data/input/dataset.csv"
    slnb_json: str = "data/input/slnb.json"
    elnd_json: str = "data/input/elnd.json"
    pairings_json: str = "data/output/pairings.json"
    pairings_csv: str = "data/output/pairings.csv"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for backward compatibility."""
        return asdict(self)


@dataclass
class RecordsConfig:
    """Record import configuration."""
    missing_value_threshold: int = 1  # more missing cells than this -> discard

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for backward compatibility."""
        return asdict(self)


@dataclass
class VariablesConfig:
    """Declared histopathological variables, in input column order."""
    names: List[str] = field(default_factory=_default_names)
    labels: Dict[str, str] = field(default_factory=_default_labels)
    codes: Dict[str, List[int]] = field(default_factory=_default_codes)
    disabled: List[str] = field(default_factory=list)

    def __post_init__(self):
        # Env overrides may deliver a comma separated string instead of a JSON list
        if isinstance(self.disabled, str):
            self.disabled = [s.strip() for s in self.disabled.split(",") if s.strip()]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for backward compatibility."""
        return asdict(self)

    def to_schema(self) -> VariableSchema:
        """Build the VariableSchema used by the matching engine.

        Raises:
            ConfigurationError: If a disabled variable is not declared
        """
        unknown = [name for name in self.disabled if name not in self.names]
        if unknown:
            raise ConfigurationError(f"Cannot disable undeclared variable(s): {', '.join(unknown)}")
        return VariableSchema(tuple(
            Variable(
                name=name,
                label=self.labels.get(name, name),
                codes=tuple(int(c) for c in self.codes.get(name, [])),
                disabled=name in self.disabled,
            )
            for name in self.names
        ))


@dataclass
class MatchingConfig:
    """Assignment resolver configuration."""
    max_iterations: int = 10000  # repair passes before giving up
    accept_unconverged: bool = False  # keep last state on ConvergenceLimitError
    progress_interval: int = 100  # log resolver progress every N passes (0 = off)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for backward compatibility."""
        return asdict(self)


@dataclass
class GeneratorConfig:
    """Random sample dataset generation."""
    min_rows: int = 100
    max_rows: int = 200
    seed: int | None = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for backward compatibility."""
        return asdict(self)


@dataclass
class AppConfig:
    """Root application configuration with all subsections."""
    log_level: str = "INFO"
    data: DataConfig = field(default_factory=DataConfig)
    records: RecordsConfig = field(default_factory=RecordsConfig)
    variables: VariablesConfig = field(default_factory=VariablesConfig)
    ratios: Dict[str, Dict[Any, float]] = field(default_factory=_default_ratios)
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to nested dictionary for backward compatibility.

        Returns:
            Nested dict structure matching config format
        """
        return {
            "log_level": self.log_level,
            "data": self.data.to_dict(),
            "records": self.records.to_dict(),
            "variables": self.variables.to_dict(),
            "ratios": {name: {str(code): ratio for code, ratio in table.items()} for name, table in self.ratios.items()},
            "matching": self.matching.to_dict(),
            "generator": self.generator.to_dict(),
        }

    def ratio_table(self) -> RatioTable:
        return RatioTable.from_mapping(self.ratios)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> AppConfig:
        """Create typed config from dictionary.

        Args:
            data: Dictionary config (from load_config)

        Returns:
            Typed AppConfig instance
        """
        return cls(
            log_level=data.get("log_level", "INFO"),
            data=DataConfig(**data.get("data", {})),
            records=RecordsConfig(**data.get("records", {})),
            variables=VariablesConfig(**data.get("variables", {})),
            ratios=data.get("ratios", _default_ratios()),
            matching=MatchingConfig(**data.get("matching", {})),
            generator=GeneratorConfig(**data.get("generator", {})),
        )


def build_schema(cfg: Dict[str, Any]) -> VariableSchema:
    """VariableSchema from a config dict."""
    return VariablesConfig(**cfg.get("variables", {})).to_schema()


def build_ratio_table(cfg: Dict[str, Any]) -> RatioTable:
    """RatioTable from a config dict (string codes from JSON/env are coerced)."""
    return RatioTable.from_mapping(cfg.get("ratios", _default_ratios()))


def build_matching_config(cfg: Dict[str, Any]) -> MatchingConfig:
    return MatchingConfig(**cfg.get("matching", {}))


__all__ = [
    "AppConfig",
    "DataConfig",
    "RecordsConfig",
    "VariablesConfig",
    "MatchingConfig",
    "GeneratorConfig",
    "build_schema",
    "build_ratio_table",
    "build_matching_config",
]
