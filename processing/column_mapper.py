"""
Column mapper — resolves raw spreadsheet headers to the canonical header set.

Uses a three-step cascade:
  1. Exact match against the canonical headers (case-insensitive)
  2. Known renames (e.g. "Artificial Intelligence" → "AI")
  3. Fuzzy match against the canonical headers (thefuzz, threshold 80)

Headers that cannot be resolved are reported as unmapped; the ingestion
adapter drops their columns and warns about them instead of carrying
unknown fields into the validator.

Public API:
    map_columns(raw_columns) → ColumnMappingResult
"""

import logging
from dataclasses import dataclass, field

from config.column_mapping import EXACT_MATCHES, KNOWN_RENAMES
from config.schema import REQUIRED_COLUMNS
from utils.fuzzy_match import best_match

logger = logging.getLogger(__name__)

FUZZY_THRESHOLD: int = 80


# ═══════════════════════════════════════════════════════════════════════════
# Data class
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class ColumnMappingResult:
    """Result of mapping raw header names to canonical headers."""

    mapping: dict[str, str | None] = field(default_factory=dict)
    """raw_name → canonical header, or None if unmapped."""

    unmapped: list[str] = field(default_factory=list)
    """Raw header names that matched nothing."""

    confidence: dict[str, int] = field(default_factory=dict)
    """raw_name → match confidence (100 = exact/known rename, 80-99 = fuzzy)."""

    duplicates: list[str] = field(default_factory=list)
    """Raw header names that resolved to a canonical header already taken."""

    resolved: list[str | None] = field(default_factory=list)
    """Canonical header per input position (None where unmapped)."""


_CANONICAL_CANDIDATES: dict[str, str] = {
    column.lower(): column for column in REQUIRED_COLUMNS
}


# ═══════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════

def map_columns(raw_columns: list[str]) -> ColumnMappingResult:
    """
    Map raw header names to canonical header names.

    Blank headers are treated as unmapped.  When two raw headers resolve to
    the same canonical header, the first one keeps it and the later one is
    recorded in ``duplicates`` (and mapped to None).

    Args:
        raw_columns: Header cell values from the first sheet row.

    Returns:
        ColumnMappingResult with mapping, unmapped list, confidence scores
        and duplicate headers.
    """
    result = ColumnMappingResult()
    taken: set[str] = set()

    for raw_name in raw_columns:
        canonical, score = _map_single_column(raw_name)

        if canonical is not None and canonical in taken:
            logger.info(
                f"Header '{raw_name}' duplicates '{canonical}' — column ignored"
            )
            result.duplicates.append(raw_name)
            canonical, score = None, 0
        elif canonical is None:
            result.unmapped.append(raw_name)
            logger.info(f"Unmapped header: '{raw_name}'")
        else:
            taken.add(canonical)
            logger.debug(
                f"Mapped '{raw_name}' → '{canonical}' (confidence={score})"
            )

        result.mapping[raw_name] = canonical
        result.confidence[raw_name] = score
        result.resolved.append(canonical)

    logger.info(
        f"Column mapping complete: {len(result.mapping)} headers processed, "
        f"{len(result.unmapped)} unmapped, {len(result.duplicates)} duplicated"
    )

    return result


# ═══════════════════════════════════════════════════════════════════════════
# Internal helpers
# ═══════════════════════════════════════════════════════════════════════════

def _map_single_column(raw_name: str) -> tuple[str | None, int]:
    """Run one header through the exact → rename → fuzzy cascade."""
    normalized = str(raw_name).strip().lower()
    if not normalized:
        return None, 0

    if normalized in EXACT_MATCHES:
        return EXACT_MATCHES[normalized], 100

    if normalized in KNOWN_RENAMES:
        return KNOWN_RENAMES[normalized], 100

    return best_match(normalized, _CANONICAL_CANDIDATES, threshold=FUZZY_THRESHOLD)
