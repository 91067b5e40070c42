"""
Weighted scorer — turns validated raw scores into composite index scores.

For every record and every sector: weighted = raw score × sector weight, and
the composite total is the sum of the weighted values in fixed sector order.
The scorer is a pure function of (records, weights): it keeps no state and
never re-validates, so it is safe to call on every weight change.

A sector with no entry in the weights mapping contributes 0 to the total.

Public API:
    score(records, weights) → list[CountryRecord]
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from config.schema import SECTORS, Sector
from processing.validator import ValidatedRecord

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# Data class
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CountryRecord:
    """One scored country, as handed to the map, charts, and table."""

    country: str
    raw_scores: dict[Sector, float]
    """Validated, unweighted per-sector scores."""
    sector_scores: dict[Sector, float]
    """Per-sector weighted contributions (raw × weight)."""
    total_score: float
    """Sum of the weighted contributions."""


# ═══════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════

def score(
    records: Iterable[ValidatedRecord | CountryRecord],
    weights: Mapping[str, float],
) -> list[CountryRecord]:
    """
    Apply sector weights to each record's raw scores.

    Args:
        records: Validated (and normally name-normalized) records, or
                 previously scored records when rescoring.
        weights: Sector key → weight.  Keys may be Sector members or their
                 string values.  Missing sectors weigh 0.

    Returns:
        One CountryRecord per input record, in input order.
    """
    effective = {sector: float(weights.get(sector, 0.0)) for sector in SECTORS}

    missing = [sector.value for sector in SECTORS if sector not in weights]
    if missing:
        logger.debug(f"No weight for sectors {missing} — contributing 0")

    scored: list[CountryRecord] = []
    for record in records:
        raw_scores = _raw_scores_of(record)
        weighted = {
            sector: raw_scores[sector] * effective[sector] for sector in SECTORS
        }
        scored.append(
            CountryRecord(
                country=record.country,
                raw_scores=dict(raw_scores),
                sector_scores=weighted,
                total_score=sum(weighted[sector] for sector in SECTORS),
            )
        )

    logger.info(f"Scoring complete: {len(scored)} countries scored")

    return scored


# ═══════════════════════════════════════════════════════════════════════════
# Internal helpers
# ═══════════════════════════════════════════════════════════════════════════

def _raw_scores_of(record: ValidatedRecord | CountryRecord) -> dict[Sector, float]:
    """Unweighted scores of either record type."""
    if isinstance(record, CountryRecord):
        return record.raw_scores
    return record.sector_scores
