"""Spreadsheet parsing service for row-level claim extraction."""

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any

from openpyxl import load_workbook

logger = logging.getLogger(__name__)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _clean_cell(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def parse_spreadsheet(file_path: str) -> list[dict[str, Any]]:
    """Read the first worksheet of an XLSX file into header-keyed rows.

    The first non-empty row is the header row. Header cells are trimmed and
    blank headers are dropped along with their column. Each following
    non-blank row becomes a dict of header → cell value; blank cells are
    omitted.

    Args:
        file_path: Path to the ``.xlsx`` file on disk.

    Returns:
        One dict per data row, in sheet order.

    Raises:
        ValueError: If the file is missing or unreadable, has no header
            row, or contains no data rows.
    """
    path = Path(file_path)
    if not path.exists():
        raise ValueError(f"File not found: {file_path}")

    try:
        workbook = load_workbook(str(path), read_only=True, data_only=True)
    except Exception as exc:
        logger.error("Failed to open spreadsheet: %s — %s", file_path, exc)
        raise ValueError(
            f"Failed to parse {path.name}. Please ensure it's a valid XLSX file."
        ) from exc

    try:
        sheet = workbook.worksheets[0]
        headers: dict[int, str] = {}
        rows: list[dict[str, Any]] = []

        for values in sheet.iter_rows(values_only=True):
            if all(_is_blank(v) for v in values):
                continue
            if not headers:
                headers = {
                    idx: str(v).strip() for idx, v in enumerate(values) if not _is_blank(v)
                }
                seen: set[str] = set()
                for header in headers.values():
                    if header in seen:
                        logger.warning(
                            "Duplicate header '%s' in %s — later column overwrites earlier values",
                            header,
                            path.name,
                        )
                    seen.add(header)
                continue
            row = {
                headers[idx]: _clean_cell(v)
                for idx, v in enumerate(values)
                if idx in headers and not _is_blank(v)
            }
            if row:
                rows.append(row)
    finally:
        workbook.close()

    if not headers:
        raise ValueError(f"Could not detect any column headers in {path.name}.")
    if not rows:
        raise ValueError(f"No data rows found below the header row in {path.name}.")

    logger.info(
        "Parsed %d row(s) with %d column(s) from %s",
        len(rows),
        len(headers),
        path.name,
    )
    return rows
