"""
Country name normalizer — maps name variants to canonical map names.

Values are matched case-insensitively after stripping whitespace against
the alias table in config/country_aliases.py and replaced with the
canonical form.  Names that match nothing pass through unchanged.

The normalizer never validates, drops, or reorders records, and never
modifies the records it is given: renamed records are new copies.

Public API:
    normalize(records) → list of records
    canonical_country_name(name) → str
"""

import dataclasses
import logging
from collections.abc import Iterable
from typing import TypeVar

from config.country_aliases import COUNTRY_NAME_MAPPINGS

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")


# ═══════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════

def canonical_country_name(name: str) -> str:
    """
    Return the canonical form of one country name.

    Args:
        name: A country name as it appears in the sheet.

    Returns:
        The mapped canonical name, or *name* unchanged if it has no alias.
    """
    return COUNTRY_NAME_MAPPINGS.get(name.strip().lower(), name)


def normalize(records: Iterable[RecordT]) -> list[RecordT]:
    """
    Apply the country alias table to the ``country`` field of each record.

    Args:
        records: Dataclass records with a ``country`` attribute (validated
                 or scored records).

    Returns:
        A new list in the same order.  Records whose name changed are
        replaced by copies; the rest are the same objects.
    """
    normalized: list[RecordT] = []
    changed = 0

    for record in records:
        canonical = canonical_country_name(record.country)
        if canonical != record.country:
            logger.debug(f"Normalized country '{record.country}' → '{canonical}'")
            record = dataclasses.replace(record, country=canonical)
            changed += 1
        normalized.append(record)

    logger.info(
        f"Normalization complete: {len(normalized)} records, "
        f"{changed} country names changed"
    )

    return normalized
