"""
Index schema definitions for the ingested country scores sheet.

Defines the fixed sector enumeration, the required spreadsheet headers, the
header → internal field table, default weights, and display metadata.
Everything downstream keys off these constants; sectors are never derived
from the spreadsheet header.
"""

from enum import Enum


class Sector(str, Enum):
    """The six technology sectors scored per country.

    Members compare and hash equal to their string values, so a weights dict
    keyed by plain strings ("ai") and one keyed by members are interchangeable.
    """

    AI = "ai"
    QUANTUM = "quantum"
    SEMICONDUCTORS = "semiconductors"
    BIOTECH = "biotech"
    SPACE = "space"
    FINTECH = "fintech"


# Sector order used for summation, tables, and charts.
SECTORS: tuple[Sector, ...] = tuple(Sector)

# Header of the country column in the raw sheet.
COUNTRY_COLUMN: str = "Country"

# Sheet header (exact, case-sensitive) for each sector.
SECTOR_COLUMNS: dict[Sector, str] = {
    Sector.AI: "AI",
    Sector.QUANTUM: "Quantum",
    Sector.SEMICONDUCTORS: "Semiconductors",
    Sector.BIOTECH: "Biotech",
    Sector.SPACE: "Space",
    Sector.FINTECH: "Fintech",
}

# Columns that must be present in the first row of every ingested sheet,
# in the order they are reported when missing.
REQUIRED_COLUMNS: list[str] = [COUNTRY_COLUMN, *SECTOR_COLUMNS.values()]

# Display names used by tables and charts.
SECTOR_NAMES: dict[Sector, str] = dict(SECTOR_COLUMNS)

SECTOR_COLORS: dict[Sector, str] = {
    Sector.AI: "#4299E1",
    Sector.QUANTUM: "#48BB78",
    Sector.SEMICONDUCTORS: "#ED8936",
    Sector.BIOTECH: "#9F7AEA",
    Sector.SPACE: "#F56565",
    Sector.FINTECH: "#38B2AC",
}

# Starting weights for a new session. They sum to 1.0.
DEFAULT_SECTOR_WEIGHTS: dict[Sector, float] = {
    Sector.AI: 0.2,
    Sector.QUANTUM: 0.1,
    Sector.SEMICONDUCTORS: 0.2,
    Sector.BIOTECH: 0.2,
    Sector.SPACE: 0.2,
    Sector.FINTECH: 0.1,
}

# Weight slider bounds (UI only; the pipeline accepts any weight >= 0).
WEIGHT_SLIDER_STEP_PERCENT: int = 5
WEIGHT_SLIDER_MAX_PERCENT: int = 100

# Raw scores are expected in [0, 1]; values above this raise a warning.
SCORE_WARNING_THRESHOLD: float = 1.0
