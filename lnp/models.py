"""Domain model types for clinical case records.

These dataclasses provide type-safe, immutable representations of the
variable schema, the hazard ratio table and the records being paired. Record
values are kept as a fixed-order tuple of ``(variable, value)`` pairs keyed
against the schema, so every consumer iterates them in the same order.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any, Tuple, Mapping, Iterator

from .errors import ConfigurationError


class Cohort(str, Enum):
    SLNB = "SLNB"
    ELND = "ELND"


@dataclass(frozen=True)
class Variable:
    """One declared histopathological variable."""
    name: str
    label: str
    codes: Tuple[int, ...] = ()
    disabled: bool = False


@dataclass(frozen=True)
class VariableSchema:
    """Ordered, fixed list of declared variables."""
    variables: Tuple[Variable, ...]

    def __post_init__(self):
        names = [v.name for v in self.variables]
        if len(set(names)) != len(names):
            raise ConfigurationError(f"Duplicate variable names in schema: {names}")

    def __iter__(self) -> Iterator[Variable]:
        return iter(self.variables)

    def __len__(self) -> int:
        return len(self.variables)

    def __contains__(self, name: object) -> bool:
        return any(v.name == name for v in self.variables)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(v.name for v in self.variables)

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(v.label for v in self.variables)

    def is_disabled(self, name: str) -> bool:
        return any(v.name == name and v.disabled for v in self.variables)


@dataclass(frozen=True)
class RatioTable:
    """Hazard ratio lookup: variable name -> integer code -> ratio.

    Lookups of undeclared codes or null values yield 0.
    """
    ratios: Mapping[str, Mapping[int, float]] = field(default_factory=dict)

    def ratio(self, variable: str, value: Optional[int]) -> float:
        if value is None:
            return 0.0
        return self.ratios.get(variable, {}).get(value, 0.0)

    def validate(self, schema: VariableSchema) -> None:
        """Raise ConfigurationError if the table names a variable absent from the schema."""
        unknown = [name for name in self.ratios if name not in schema]
        if unknown:
            raise ConfigurationError(
                f"Ratio table references undeclared variable(s): {', '.join(unknown)}. "
                f"Declared: {', '.join(schema.names)}"
            )

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Mapping[Any, Any]]) -> RatioTable:
        """Build a table from configuration data, coercing codes to int and ratios to float.

        Configuration sources (JSON, environment variables) deliver codes as
        strings, so ``{"3": "2.6"}`` and ``{3: 2.6}`` are equivalent.
        """
        ratios: Dict[str, Dict[int, float]] = {}
        for variable, entries in raw.items():
            if not isinstance(entries, Mapping):
                raise ConfigurationError(f"Ratios for '{variable}' must be a mapping of code -> ratio")
            table: Dict[int, float] = {}
            for code, ratio in entries.items():
                try:
                    int_code = int(code)
                except (TypeError, ValueError):
                    raise ConfigurationError(f"Ratio code {code!r} for '{variable}' is not an integer") from None
                try:
                    table[int_code] = float(ratio)
                except (TypeError, ValueError):
                    raise ConfigurationError(f"Ratio {ratio!r} for '{variable}'={code} is not numeric") from None
            ratios[variable] = table
        return cls(ratios=ratios)


@dataclass(frozen=True)
class Record:
    """A single SLNB or ELND case record. Never mutated after import."""
    id: int
    cohort: Cohort
    values: Tuple[Tuple[str, Optional[int]], ...]
    discard: bool = False
    gender_code: Optional[int] = None
    surgery_date: Optional[str] = None

    def value(self, variable: str) -> Optional[int]:
        for name, value in self.values:
            if name == variable:
                return value
        return None

    def missing_count(self) -> int:
        return sum(1 for _, value in self.values if value is None)

    @classmethod
    def build(
        cls,
        id: int,
        cohort: Cohort | str,
        values: Mapping[str, Optional[int]],
        schema: VariableSchema,
        discard: bool = False,
        gender_code: Optional[int] = None,
        surgery_date: Optional[str] = None,
    ) -> Record:
        """Create a record with values ordered by schema; disabled variables are stored as null."""
        ordered = tuple(
            (var.name, None if var.disabled else values.get(var.name))
            for var in schema
        )
        return cls(
            id=id,
            cohort=Cohort(cohort),
            values=ordered,
            discard=discard,
            gender_code=gender_code,
            surgery_date=surgery_date,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "id": self.id,
            "cohort": self.cohort.value,
            "gender_code": self.gender_code,
            "surgery_date": self.surgery_date,
            "variables": {name: value for name, value in self.values},
            "discard": self.discard,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], schema: VariableSchema) -> Record:
        return cls.build(
            id=int(data["id"]),
            cohort=data["cohort"],
            values=data.get("variables", {}),
            schema=schema,
            discard=bool(data.get("discard", False)),
            gender_code=data.get("gender_code"),
            surgery_date=data.get("surgery_date"),
        )


__all__ = ["Cohort", "Variable", "VariableSchema", "RatioTable", "Record"]
