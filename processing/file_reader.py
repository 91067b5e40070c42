"""
Excel file reader — turns an uploaded index workbook into raw row records.

This is the thin ingestion adapter in front of the validator.  It does no
validation of its own beyond what is needed to build rows:
  - the first sheet is used, and its first row is the header;
  - headers are resolved to canonical names via column_mapper; columns with
    unknown or duplicated headers are dropped and reported as warnings;
  - rows with an empty country cell are skipped;
  - empty sector cells are read as 0.

Cell values are otherwise passed through as openpyxl returns them, so
numbers stored as text reach the validator as strings.

Public API:
    read_excel_file(source) → FileReadResult
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any

import openpyxl

from config.schema import COUNTRY_COLUMN
from processing.column_mapper import map_columns

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# Data class
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class FileReadResult:
    """Complete result of reading one workbook."""

    rows: list[dict[str, Any]] = field(default_factory=list)
    sheet_name: str = ""
    column_mapping: dict[str, str | None] = field(default_factory=dict)
    unmapped_columns: list[str] = field(default_factory=list)
    skipped_rows: list[dict] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


# ═══════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════

def read_excel_file(source: Path | str | IO[bytes]) -> FileReadResult:
    """
    Read the first sheet of an .xlsx workbook into row mappings.

    Args:
        source: Path to the workbook, or a binary file-like object such as
                a Streamlit upload.

    Returns:
        FileReadResult with one dict per country row (canonical header →
        cell value) and any errors or warnings.  Errors are reported, never
        raised.
    """
    result = FileReadResult()
    source_name = _source_name(source)

    try:
        workbook = openpyxl.load_workbook(source, read_only=True, data_only=True)
    except Exception as exc:
        error_message = f"Cannot open file '{source_name}': {exc}"
        logger.error(error_message)
        result.errors.append(error_message)
        return result

    try:
        worksheet = workbook.worksheets[0]
        result.sheet_name = worksheet.title
        logger.info(f"Reading sheet '{worksheet.title}' from '{source_name}'")

        row_iter = worksheet.iter_rows(values_only=True)
        header_cells = next(row_iter, None)
        if header_cells is None:
            error_message = f"Sheet '{worksheet.title}' in '{source_name}' is empty"
            logger.error(error_message)
            result.errors.append(error_message)
            return result

        headers = [_header_text(cell) for cell in header_cells]
        columns = _resolve_columns(headers, result)

        for excel_row, cells in enumerate(row_iter, start=2):
            row = _build_row(cells, columns)
            if row is None:
                continue
            if COUNTRY_COLUMN in row and _is_blank(row[COUNTRY_COLUMN]):
                result.skipped_rows.append(
                    {"row": excel_row, "reason": "empty country cell"}
                )
                continue
            result.rows.append(row)
    except Exception as exc:
        error_message = f"Cannot read sheet data from '{source_name}': {exc}"
        logger.error(error_message, exc_info=True)
        result.errors.append(error_message)
        result.rows = []
        return result
    finally:
        workbook.close()

    logger.info(
        f"Finished reading '{source_name}': {len(result.rows)} rows, "
        f"{len(result.skipped_rows)} skipped, "
        f"{len(result.unmapped_columns)} unknown columns"
    )

    return result


# ═══════════════════════════════════════════════════════════════════════════
# Internal helpers
# ═══════════════════════════════════════════════════════════════════════════

def _resolve_columns(
    headers: list[str],
    result: FileReadResult,
) -> list[tuple[int, str]]:
    """
    Map header cells to canonical names and record what was dropped.

    Returns:
        (column position, canonical header) for every kept column.
    """
    mapping_result = map_columns(headers)
    result.column_mapping = mapping_result.mapping
    result.unmapped_columns = [name for name in mapping_result.unmapped if name]

    if result.unmapped_columns:
        result.warnings.append(
            f"Unknown columns ignored: {', '.join(result.unmapped_columns)}"
        )
    if mapping_result.duplicates:
        result.warnings.append(
            f"Duplicate columns ignored: {', '.join(mapping_result.duplicates)}"
        )
    for warning in result.warnings:
        logger.warning(warning)

    return [
        (position, canonical)
        for position, canonical in enumerate(mapping_result.resolved)
        if canonical is not None
    ]


def _build_row(
    cells: tuple,
    columns: list[tuple[int, str]],
) -> dict[str, Any] | None:
    """
    Build one row mapping, or None if every cell in the row is blank.

    Sector cells that are blank become 0.
    """
    if all(_is_blank(cell) for cell in cells):
        return None

    row: dict[str, Any] = {}
    for position, canonical in columns:
        value = cells[position] if position < len(cells) else None
        if canonical != COUNTRY_COLUMN and _is_blank(value):
            value = 0
        row[canonical] = value
    return row


def _header_text(cell: object) -> str:
    return "" if cell is None else str(cell).strip()


def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _source_name(source: object) -> str:
    """Best-effort display name for log and error messages."""
    if isinstance(source, (str, Path)):
        return Path(source).name
    return getattr(source, "name", "uploaded file")
