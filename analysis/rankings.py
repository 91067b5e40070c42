"""
Pure calculation functions for the ranking views.

Each function takes scored CountryRecords and returns a structure ready for
the table, bar chart, or pie chart.  No side effects, no plotting, and no
re-validation or re-scoring: the records are used as the scorer left them.

Edge cases:
- Empty record list → empty DataFrame with the correct columns, or zeros
- Division by zero → 0.0
"""

import logging
from collections.abc import Sequence

import numpy as np
import pandas as pd

from config.schema import SECTOR_NAMES, SECTORS, Sector
from processing.scorer import CountryRecord

logger = logging.getLogger(__name__)

COUNTRY_LABEL = "Country"
TOTAL_LABEL = "Total Score"
RANK_LABEL = "Rank"

MAX_INTENSITY = 0.9
SHADE_RGB = "34, 197, 94"

_SECTOR_LABELS = [SECTOR_NAMES[sector] for sector in SECTORS]
_SHADED_COLUMNS = {
    TOTAL_LABEL: "total",
    **{SECTOR_NAMES[sector]: sector.value for sector in SECTORS},
}


def records_to_frame(records: Sequence[CountryRecord]) -> pd.DataFrame:
    """
    Flatten scored records into one row per country.

    Returns:
        DataFrame with columns: [Country, AI, Quantum, ..., Fintech, Total Score]
        Sector columns hold the weighted contributions, in record order.
    """
    columns = [COUNTRY_LABEL, *_SECTOR_LABELS, TOTAL_LABEL]
    if not records:
        return pd.DataFrame(columns=columns)

    rows = [
        {
            COUNTRY_LABEL: record.country,
            **{
                SECTOR_NAMES[sector]: record.sector_scores[sector]
                for sector in SECTORS
            },
            TOTAL_LABEL: record.total_score,
        }
        for record in records
    ]
    return pd.DataFrame(rows, columns=columns)


def rank_countries(
    records: Sequence[CountryRecord],
    sort_by: Sector | str = "total",
    ascending: bool = False,
) -> pd.DataFrame:
    """
    Sort countries by total score or by one sector's weighted score.

    Used for: the data table (any sort column) and the stacked bar chart
    (total, descending).

    Args:
        records: Scored records.
        sort_by: "total", or a Sector / sector key.
        ascending: Sort direction; the default puts the leader first.

    Returns:
        DataFrame of records_to_frame() columns plus a 1-based "Rank" column
        reflecting the chosen order.  Ties keep their input order.

    Raises:
        ValueError: If sort_by is neither "total" nor a sector key.
    """
    sort_column = _sort_column(sort_by)
    frame = records_to_frame(records)

    ranked = frame.sort_values(
        sort_column, ascending=ascending, kind="stable"
    ).reset_index(drop=True)
    ranked.insert(0, RANK_LABEL, np.arange(1, len(ranked) + 1))
    return ranked


def sector_averages(
    records: Sequence[CountryRecord],
    country: str | None = None,
) -> dict[Sector, float]:
    """
    Mean weighted score per sector, for the sector share pie chart.

    Args:
        records: Scored records.
        country: If given, only that country's record is averaged (its own
                 contributions).  An unknown country gives all zeros.

    Returns:
        Sector → mean weighted score, in sector order.
    """
    if country is not None:
        records = [record for record in records if record.country == country]

    if not records:
        return {sector: 0.0 for sector in SECTORS}

    return {
        sector: float(np.mean([record.sector_scores[sector] for record in records]))
        for sector in SECTORS
    }


def column_maxima(records: Sequence[CountryRecord]) -> dict[str, float]:
    """
    Largest total and per-sector weighted score, used to shade table cells.

    Returns:
        {"total": max total, "ai": max ai, ...}; all 0.0 for no records.
    """
    maxima = {"total": max((r.total_score for r in records), default=0.0)}
    for sector in SECTORS:
        maxima[sector.value] = max(
            (record.sector_scores[sector] for record in records), default=0.0
        )
    return maxima


def score_intensity(value: float, maximum: float) -> float:
    """Shade for a table cell: value / maximum, clamped to [0, 0.9]."""
    if maximum == 0 or pd.isna(maximum):
        return 0.0
    return max(0.0, min(MAX_INTENSITY, value / maximum))


def shading_styles(table: pd.DataFrame, maxima: dict[str, float]) -> pd.DataFrame:
    """
    CSS background for every cell of a ranked table.

    Score columns get a green fill whose opacity is score_intensity() of the
    cell against its column maximum; other columns get no style.  The result
    has the table's index and columns, as pandas Styler.apply(axis=None)
    expects.

    Args:
        table: Frame from rank_countries() or records_to_frame(), possibly
            filtered to fewer rows.
        maxima: Output of column_maxima() over the full record set.
    """
    styles = pd.DataFrame("", index=table.index, columns=table.columns)
    for label, key in _SHADED_COLUMNS.items():
        if label not in table.columns:
            continue
        maximum = maxima.get(key, 0.0)
        styles[label] = [
            f"background-color: rgba({SHADE_RGB}, "
            f"{score_intensity(value, maximum):.2f})"
            for value in table[label]
        ]
    return styles


def _sort_column(sort_by: Sector | str) -> str:
    key = str(getattr(sort_by, "value", sort_by)).lower()
    if key == "total":
        return TOTAL_LABEL
    try:
        return SECTOR_NAMES[Sector(key)]
    except ValueError:
        raise ValueError(
            f"Cannot sort by '{sort_by}'. Use 'total' or one of "
            f"{[sector.value for sector in SECTORS]}"
        ) from None
