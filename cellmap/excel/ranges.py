from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from .cellref import InvalidReference, format_cell_ref, parse_cell_ref

"""Rectangular cell ranges ("B4:D15") and their expansion into cell references.

Parsing is lazy: ``parse_range_string`` only splits the text, the cell syntax
is checked when bounds are requested through ``CellRange.dimensions``.
"""

__all__ = [
    "CellRange",
    "InvalidRange",
    "RangeDimensions",
    "expand_range",
    "parse_range_string",
]


class InvalidRange(InvalidReference):
    """Raised when a range cannot be decomposed into two valid cell references."""


class RangeDimensions(NamedTuple):
    start_row: int
    start_col: int
    end_row: int
    end_col: int
    row_count: int
    col_count: int


@dataclass(frozen=True)
class CellRange:
    """A rectangular region identified by its start and end references.

    ``sheet`` is None when the range applies to whatever sheet the caller
    has selected. No order normalisation happens: a range whose end
    precedes its start has non-positive counts and covers no cells.
    """
    start: str
    end: str
    sheet: str | None = None

    @property
    def is_single_cell(self) -> bool:
        return self.start == self.end

    def dimensions(self) -> RangeDimensions:
        try:
            first = parse_cell_ref(self.start)
            last = parse_cell_ref(self.end)
        except InvalidReference as e:
            raise InvalidRange(f"invalid range {str(self)!r}: {e}") from e
        return RangeDimensions(
            start_row=first.row,
            start_col=first.col,
            end_row=last.row,
            end_col=last.col,
            row_count=last.row - first.row + 1,
            col_count=last.col - first.col + 1,
        )

    def is_valid(self) -> bool:
        try:
            self.dimensions()
        except InvalidRange:
            return False
        return True

    def __str__(self) -> str:
        if self.is_single_cell:
            return self.start
        return f"{self.start}:{self.end}"


def parse_range_string(text: str, sheet: str | None = None) -> CellRange:
    """Split a range string into a CellRange.

    Text without ':' is a single-cell range. Otherwise the text is split on
    the first ':' only and both halves are trimmed.
    """
    if ":" not in text:
        ref = text.strip()
        return CellRange(start=ref, end=ref, sheet=sheet)
    start, end = text.split(":", 1)
    return CellRange(start=start.strip(), end=end.strip(), sheet=sheet)


def expand_range(cell_range: CellRange | str) -> list[str]:
    """List every cell reference covered by a range, row by row.

    Raises:
        InvalidRange: If either endpoint is not a valid cell reference.
    """
    if isinstance(cell_range, str):
        cell_range = parse_range_string(cell_range)
    dims = cell_range.dimensions()
    return [
        format_cell_ref(row, col)
        for row in range(dims.start_row, dims.end_row + 1)
        for col in range(dims.start_col, dims.end_col + 1)
    ]
