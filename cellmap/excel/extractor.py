from __future__ import annotations

import logging
import math
import numbers
import re
from typing import Any

from ..models.records import ExtractedRecord
from ..models.workbook import Grid
from .ranges import CellRange, InvalidRange, parse_range_string

"""Range-scoped name/value extraction.

Each row of a range yields at most one record: the leftmost cell of the
range is the name, the next ``value_columns`` cells are the values. Reads
never leave the column span of the queried range, so two groups placed
side by side in one sheet row cannot bleed into each other.
"""

__all__ = [
    "extract_records",
    "is_absent",
    "read_cell",
    "stringify",
    "to_number",
]

logger = logging.getLogger(__name__)

# decimal/exponent forms plus 0x/0o/0b integers; ASCII digits only
_NUMBER_PATTERN = re.compile(
    r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+",
    re.ASCII,
)


def is_absent(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)


def read_cell(grid: Grid, row: int, col: int) -> Any:
    """Return ``grid[row][col]`` or None when the row or cell does not exist."""
    if row < 0 or col < 0:
        return None
    try:
        cells = grid[row]
    except IndexError:
        return None
    if cells is None:
        return None
    try:
        return cells[col]
    except IndexError:
        return None


def to_number(value: Any) -> int | float:
    """Coerce a cell value to a number; anything non-numeric becomes 0."""
    if is_absent(value):
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        number = float(value)
        return number if math.isfinite(number) else 0
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        if not _NUMBER_PATTERN.fullmatch(text):
            return 0
        if text[:2].lower() in ("0x", "0o", "0b"):
            return int(text, 0)
        number = float(text)
        if not math.isfinite(number):
            return 0
        # "7" and "7.0" both read as 7
        return int(number) if number.is_integer() else number
    return 0


def stringify(value: Any) -> str:
    """Render a cell value as display text ("" for absent cells)."""
    if is_absent(value):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def extract_records(
    grid: Grid, cell_range: CellRange | str, value_columns: int
) -> list[ExtractedRecord]:
    """Scan a range row by row and build name/value records.

    Args:
        grid: Row-major sheet data. Short or missing rows read as empty.
        cell_range: Range to scan, as a CellRange or a range string.
        value_columns: Number of value cells to the right of the name cell.

    Returns:
        One record per row whose name cell is non-empty, in row order. A
        malformed range yields an empty list.
    """
    if isinstance(cell_range, str):
        cell_range = parse_range_string(cell_range)
    try:
        dims = cell_range.dimensions()
    except InvalidRange as e:
        logger.warning(f"extract: {e}")
        return []

    records: list[ExtractedRecord] = []
    # rows past the end of the grid are empty
    last_row = min(dims.end_row, len(grid) - 1)
    for row in range(dims.start_row, last_row + 1):
        name = read_cell(grid, row, dims.start_col)
        if is_absent(name):
            continue
        label = stringify(name)
        if label == "":
            continue
        values: list[int | float] = []
        for offset in range(value_columns):
            col = dims.start_col + 1 + offset
            if col <= dims.end_col:
                values.append(to_number(read_cell(grid, row, col)))
            else:
                values.append(0)
        records.append(ExtractedRecord(name=label, values=tuple(values)))
    return records
