"""Column mapper — resolves logical claim fields from raw spreadsheet rows.

Every helper here is total: malformed or missing cells come back as ``None``
or a caller-supplied default, never as an exception.
"""

import math
import re
from typing import Any

from claim_triage.engine.models import ColumnMapping, RawRow

LOGICAL_KEYS: tuple[str, ...] = (
    "claimId",
    "state",
    "status",
    "age",
    "netPayment",
    "totalCharges",
    "providerName",
    "notes",
    "edit",
)

_NUMERIC_PREFIX = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_NUMERIC_NOISE = re.compile(r"[$,\s]")


def get_value(raw_row: RawRow, logical_key: str, mapping: ColumnMapping) -> Any | None:
    """Look up a logical field in a raw row through the client mapping.

    Args:
        raw_row: Header → cell value mapping for one spreadsheet row.
        logical_key: One of ``LOGICAL_KEYS``.
        mapping: Logical key → spreadsheet header for the client.

    Returns:
        The cell value, or ``None`` when the key is unmapped or the row
        has no such header.
    """
    header = mapping.get(logical_key)
    if not header:
        return None
    return raw_row.get(header)


def to_text(value: Any, default: str = "") -> str:
    """Render a cell as text, falling back to ``default`` for blanks."""
    if value is None:
        return default
    if isinstance(value, float):
        if math.isnan(value):
            return default
        if value.is_integer():
            return str(int(value))
    text = str(value)
    if not text.strip():
        return default
    return text


def to_float(value: Any) -> float | None:
    """Parse the leading numeric part of a cell.

    Currency symbols, thousands separators and whitespace are ignored, so
    ``"$1,250.50"`` parses as ``1250.5``. Returns ``None`` when nothing
    numeric can be read.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return None if math.isnan(number) or math.isinf(number) else number

    match = _NUMERIC_PREFIX.match(_NUMERIC_NOISE.sub("", str(value)))
    if match is None:
        return None
    number = float(match.group(0))
    return None if math.isinf(number) else number


def to_int(value: Any) -> int | None:
    """Parse a cell as an integer, truncating any fractional part."""
    number = to_float(value)
    if number is None:
        return None
    return int(number)


def normalize_code(value: Any, default: str) -> str:
    """Trim and upper-case a state/status style code."""
    return to_text(value, default).strip().upper() or default
