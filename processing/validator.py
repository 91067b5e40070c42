"""
Schema validator — checks ingested rows and builds the validated record set.

Runs in two passes:
  1. Structural: the batch must be non-empty and the first row must carry
     every required header.  Either failure is fatal and stops here.
  2. Row-level, in input order: country name check, duplicate detection
     (first occurrence wins, later ones are dropped with a warning), and a
     numeric check of each sector score.

Problems are accumulated in a ValidationReport, never raised.  Errors make
the batch invalid; warnings (duplicates, scores above 1) do not.

Public API:
    validate(rows) → ValidationResult
"""

import logging
import math
import numbers
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from config.schema import (
    COUNTRY_COLUMN,
    REQUIRED_COLUMNS,
    SCORE_WARNING_THRESHOLD,
    SECTOR_COLUMNS,
    SECTORS,
    Sector,
)
from processing.normalizer import canonical_country_name

logger = logging.getLogger(__name__)

RawRow = Mapping[str, Any]

# Leading decimal number, the way spreadsheet exports tend to write them:
# "0.5", "+.5", "1e-3", "0.75 (est.)".
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


# ═══════════════════════════════════════════════════════════════════════════
# Data classes
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ValidatedRecord:
    """A country row that passed validation, before weighting."""

    country: str
    sector_scores: dict[Sector, float]
    total_score: float
    """Unweighted sum of the six raw scores."""
    row_number: int = 0
    """1-based position of the source row in the ingested batch."""


@dataclass
class ValidationReport:
    """Diagnostics for one validation run."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    is_valid: bool = True


@dataclass
class ValidationResult:
    """Output of the validate() function."""

    records: list[ValidatedRecord] = field(default_factory=list)
    report: ValidationReport = field(default_factory=ValidationReport)


# ═══════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════

def validate(rows: Sequence[RawRow | None]) -> ValidationResult:
    """
    Validate ingested rows and return the cleaned records plus a report.

    Args:
        rows: Row mappings (header → raw cell value), one per country, in
              sheet order.  Rows are read, never modified.

    Returns:
        ValidationResult.  On a structural failure ``records`` is empty and
        the report holds exactly one error.
    """
    result = ValidationResult()
    report = result.report

    if not rows:
        _add_error(report, "No data provided")
        report.is_valid = False
        return result

    columns = set(rows[0] or {})
    missing_columns = [col for col in REQUIRED_COLUMNS if col not in columns]
    if missing_columns:
        _add_error(
            report, f"Missing required columns: {', '.join(missing_columns)}"
        )
        logger.info(f"Available columns: {sorted(map(str, columns))}")
        report.is_valid = False
        return result

    seen_countries: set[str] = set()

    for index, row in enumerate(rows):
        if not row:
            continue

        record = _validate_row(row, index + 1, seen_countries, report)
        if record is not None:
            result.records.append(record)

    report.is_valid = not report.errors

    logger.info(
        f"Validation complete: {len(rows)} rows in, "
        f"{len(result.records)} records out, valid={report.is_valid}, "
        f"{len(report.errors)} errors, {len(report.warnings)} warnings"
    )

    return result


# ═══════════════════════════════════════════════════════════════════════════
# Internal helpers
# ═══════════════════════════════════════════════════════════════════════════

def _validate_row(
    row: RawRow,
    row_number: int,
    seen_countries: set[str],
    report: ValidationReport,
) -> ValidatedRecord | None:
    """
    Check one row.  Returns the record, or None if the row is excluded.

    The country name is registered as seen before its scores are checked,
    so a later row with the same name is a duplicate even when this row is
    itself rejected for a bad score.
    """
    raw_country = row.get(COUNTRY_COLUMN)
    if not isinstance(raw_country, str) or not raw_country.strip():
        _add_error(report, f"Invalid country name at row {row_number}")
        return None

    country = raw_country.strip()
    country_key = canonical_country_name(country)
    if country_key in seen_countries:
        _add_warning(report, f"Duplicate country found: {country}")
        return None
    seen_countries.add(country_key)

    sector_scores: dict[Sector, float] = {}
    has_invalid_score = False

    for sector in SECTORS:
        value = parse_score(row.get(SECTOR_COLUMNS[sector]))

        if value is None:
            _add_error(report, f"Invalid {sector.value} value for {country}")
            has_invalid_score = True
            continue

        if value < 0:
            _add_error(report, f"Negative {sector.value} value for {country}")
            has_invalid_score = True
            continue

        if value > SCORE_WARNING_THRESHOLD:
            _add_warning(report, f"{sector.value} value > 1 for {country}")

        sector_scores[sector] = value

    if has_invalid_score:
        return None

    return ValidatedRecord(
        country=country,
        sector_scores=sector_scores,
        total_score=sum(sector_scores[sector] for sector in SECTORS),
        row_number=row_number,
    )


def parse_score(value: object) -> float | None:
    """
    Parse a raw cell value as a sector score.

    Numbers pass through as floats.  Strings are read up to the end of their
    leading decimal number, so "0.75 (est.)" gives 0.75.  Booleans, blanks,
    None, non-finite numbers, and text with no leading number give None.

    Args:
        value: The raw cell value.

    Returns:
        The parsed float, or None if the value is not a usable number.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, numbers.Real):
        raw = value
    elif isinstance(value, str):
        match = _LEADING_NUMBER.match(value.strip())
        if match is None:
            return None
        raw = match.group()
    else:
        return None

    try:
        number = float(raw)
    except (OverflowError, ValueError):
        # ints beyond the float range
        return None

    if not math.isfinite(number):
        return None
    return number


def _add_error(report: ValidationReport, message: str) -> None:
    report.errors.append(message)
    logger.warning(message)


def _add_warning(report: ValidationReport, message: str) -> None:
    report.warnings.append(message)
    logger.info(message)
