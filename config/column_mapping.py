"""
Column header mapping configuration.

Maps raw spreadsheet header names onto the canonical headers the validator
requires (see config.schema.REQUIRED_COLUMNS). Used by column_mapper.py when
the ingestion adapter reads a workbook.
"""

from config.schema import COUNTRY_COLUMN, REQUIRED_COLUMNS, SECTOR_COLUMNS, Sector

# ---------------------------------------------------------------------------
# Exact matches: raw name (lowercase) → canonical header
# The canonical headers themselves, matched case-insensitively.
# ---------------------------------------------------------------------------
EXACT_MATCHES: dict[str, str] = {
    column.lower(): column for column in REQUIRED_COLUMNS
}

# ---------------------------------------------------------------------------
# Known renames: raw name (lowercase) → canonical header
# Long-form and abbreviated sector labels seen in exported index sheets.
# ---------------------------------------------------------------------------
KNOWN_RENAMES: dict[str, str] = {
    "country name": COUNTRY_COLUMN,
    "nation": COUNTRY_COLUMN,
    "economy": COUNTRY_COLUMN,
    "artificial intelligence": SECTOR_COLUMNS[Sector.AI],
    "a.i.": SECTOR_COLUMNS[Sector.AI],
    "quantum computing": SECTOR_COLUMNS[Sector.QUANTUM],
    "quantum technology": SECTOR_COLUMNS[Sector.QUANTUM],
    "semiconductor": SECTOR_COLUMNS[Sector.SEMICONDUCTORS],
    "semis": SECTOR_COLUMNS[Sector.SEMICONDUCTORS],
    "chips": SECTOR_COLUMNS[Sector.SEMICONDUCTORS],
    "biotechnology": SECTOR_COLUMNS[Sector.BIOTECH],
    "space technology": SECTOR_COLUMNS[Sector.SPACE],
    "aerospace": SECTOR_COLUMNS[Sector.SPACE],
    "financial technology": SECTOR_COLUMNS[Sector.FINTECH],
    "fin-tech": SECTOR_COLUMNS[Sector.FINTECH],
}
