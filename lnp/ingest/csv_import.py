"""CSV import of SLNB/ELND case records.

Expected layout (one header row)::

    Gender Code, Date of Surgery, <one column per variable label>, SLNB, ELND

Variable columns must follow the configured variable order. Each data row
becomes a Record whose id is its spreadsheet row number (header is row 1).
"""

from __future__ import annotations
import csv
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Dict

from ..errors import ConfigurationError
from ..models import Cohort, Record, VariableSchema

logger = logging.getLogger(__name__)

LEADING_COLUMNS = ("Gender Code", "Date of Surgery")
COHORT_COLUMNS = ("SLNB", "ELND")


@dataclass
class ImportResult:
    """Records parsed from one input file."""
    slnb: List[Record] = field(default_factory=list)
    elnd: List[Record] = field(default_factory=list)
    skipped: int = 0  # rows flagged as neither SLNB nor ELND

    @property
    def total(self) -> int:
        return len(self.slnb) + len(self.elnd)

    @property
    def discarded(self) -> int:
        return sum(1 for r in self.slnb + self.elnd if r.discard)


def expected_header(schema: VariableSchema) -> List[str]:
    return [*LEADING_COLUMNS, *schema.labels, *COHORT_COLUMNS]


def _normalize_header(text: str) -> str:
    return re.sub(r'[^a-z0-9]', '', text.lower())


def validate_header(header: List[str], schema: VariableSchema) -> None:
    """Check header columns against the schema order.

    Columns are read by position, so only the column count is enforced. A label
    that differs from the configured one (e.g. ``Inv Front code`` for
    ``Invasive Front Type``) is logged as a warning. Comparison ignores case,
    whitespace and punctuation, so ``Dysplasia present`` matches silently.

    Raises:
        ConfigurationError: Column count disagrees with the schema
    """
    expected = expected_header(schema)
    if len(header) != len(expected):
        raise ConfigurationError(
            f"Input has {len(header)} column(s), expected {len(expected)}: {', '.join(expected)}"
        )
    for position, (got, want) in enumerate(zip(header, expected), start=1):
        if _normalize_header(got) != _normalize_header(want):
            logger.warning(
                f"Column {position} is '{got.strip()}' but the variable order expects '{want}'; "
                "reading it by position"
            )


def _parse_code(text: str, row_id: int, column: str) -> Optional[int]:
    txt = text.strip()
    if not txt:
        return None
    try:
        return int(txt)
    except ValueError:
        pass
    try:
        number = float(txt)
    except ValueError:
        logger.warning(f"Row {row_id}: '{column}' value {txt!r} is not numeric, treated as missing")
        return None
    if not number.is_integer():
        logger.warning(f"Row {row_id}: '{column}' value {txt!r} is not an integer code, treated as missing")
        return None
    return int(number)


def parse_rows(rows: List[List[str]], schema: VariableSchema, missing_value_threshold: int) -> ImportResult:
    """Convert raw CSV rows (header first) into records."""
    result = ImportResult()
    if not rows:
        return result

    validate_header(rows[0], schema)
    width = len(rows[0])
    n_lead = len(LEADING_COLUMNS)

    for index, row in enumerate(rows[1:]):
        if not any(cell.strip() for cell in row):
            continue
        row_id = index + 2  # header is row 1, spreadsheet rows start at 1
        if len(row) != width:
            raise ConfigurationError(f"Row {row_id} has {len(row)} column(s), expected {width}")

        missing = sum(1 for cell in row if not cell.strip())

        values: Dict[str, Optional[int]] = {}
        for offset, var in enumerate(schema):
            value = _parse_code(row[n_lead + offset], row_id, var.label)
            if value is not None and var.codes and value not in var.codes:
                logger.debug(f"Row {row_id}: '{var.label}'={value} outside declared codes {list(var.codes)}")
            values[var.name] = value

        slnb_flag = _parse_code(row[-2], row_id, "SLNB")
        elnd_flag = _parse_code(row[-1], row_id, "ELND")
        if slnb_flag:
            cohort = Cohort.SLNB
        elif elnd_flag:
            cohort = Cohort.ELND
        else:
            result.skipped += 1
            continue

        record = Record.build(
            id=row_id,
            cohort=cohort,
            values=values,
            schema=schema,
            discard=missing > missing_value_threshold,
            gender_code=_parse_code(row[0], row_id, LEADING_COLUMNS[0]),
            surgery_date=row[1].strip() or None,
        )
        if cohort is Cohort.SLNB:
            result.slnb.append(record)
        else:
            result.elnd.append(record)

    return result


def read_csv(path: Path, schema: VariableSchema, missing_value_threshold: int = 1) -> ImportResult:
    """Read and parse an input CSV file.

    Args:
        path: CSV file with a header row
        schema: Declared variables in column order
        missing_value_threshold: Records with more missing cells are flagged discard

    Returns:
        ImportResult with SLNB and ELND records in file order
    """
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    # utf-8-sig strips the BOM spreadsheet exports often carry
    with path.open('r', encoding='utf-8-sig', newline='') as fh:
        rows = list(csv.reader(fh))
    return parse_rows(rows, schema, missing_value_threshold)


__all__ = ["ImportResult", "expected_header", "validate_header", "parse_rows", "read_csv"]
