"""
Fuzzy string matching utilities.

Wraps the thefuzz library to provide a best-match interface for resolving
misspelled or reformatted spreadsheet headers ("Semiconductor s",
"Bio tech") to their canonical names.
"""

import logging

from thefuzz import fuzz

logger = logging.getLogger(__name__)


def best_match(
    value: str,
    candidates: dict[str, str],
    threshold: int = 80,
) -> tuple[str | None, int]:
    """
    Find the best fuzzy match for *value* among *candidates* keys.

    Scores with token_sort_ratio, which tolerates word reordering and
    stray whitespace.  On a tie the first candidate in dict order wins.

    Args:
        value: The string to match (lowercased internally).
        candidates: Dict of candidate_key (lowercase) → canonical_value.
        threshold: Minimum score (0-100) to accept a match.

    Returns:
        (canonical_value, score) if the best score reaches threshold,
        otherwise (None, 0).
    """
    if not value or not candidates:
        return None, 0

    needle = value.strip().lower()

    scored = [
        (fuzz.token_sort_ratio(needle, key), canonical)
        for key, canonical in candidates.items()
    ]
    best_score, best_canonical = max(scored, key=lambda pair: pair[0])

    if best_score < threshold:
        logger.debug(
            f"No fuzzy match for '{value}' (best '{best_canonical}' "
            f"at {best_score}, threshold {threshold})"
        )
        return None, 0

    logger.debug(f"Fuzzy matched '{value}' → '{best_canonical}' ({best_score})")
    return best_canonical, best_score
