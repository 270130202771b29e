from __future__ import annotations

import logging

from ..models.workbook import Grid
from .extractor import read_cell, stringify, to_number
from .ranges import InvalidRange, parse_range_string

"""Aggregate cell resolution for summary statistics.

An aggregate spec is a single cell ("B23"), a range ("B23:B25") or several
of them joined with '+' ("A1:A2+C5"). The numeric path sums every covered
cell; the text path returns the literal value of the first cell.
"""

__all__ = [
    "resolve_number",
    "resolve_scalar",
    "resolve_text",
    "split_spec",
]

logger = logging.getLogger(__name__)


def split_spec(spec: str) -> list[str]:
    """Split a '+'-joined spec into trimmed parts (empty parts dropped)."""
    return [part.strip() for part in spec.split("+") if part.strip()]


def resolve_number(grid: Grid, spec: str) -> int | float:
    """Sum the numeric value of every cell referenced by ``spec``.

    Malformed parts contribute 0 and are logged.
    """
    total: int | float = 0
    for part in split_spec(spec):
        try:
            dims = parse_range_string(part).dimensions()
        except InvalidRange as e:
            logger.warning(f"aggregate: {e}")
            continue
        # cells outside the grid read as 0, so only the overlap is visited
        for row in range(dims.start_row, min(dims.end_row, len(grid) - 1) + 1):
            cells = grid[row] or []
            for col in range(dims.start_col, min(dims.end_col, len(cells) - 1) + 1):
                total += to_number(cells[col])
    return total


def resolve_text(grid: Grid, spec: str) -> str:
    """Return the stringified value of the first cell referenced by ``spec``."""
    parts = split_spec(spec)
    if not parts:
        return ""
    first = parse_range_string(parts[0])
    try:
        dims = first.dimensions()
    except InvalidRange as e:
        logger.warning(f"aggregate: {e}")
        return ""
    return stringify(read_cell(grid, dims.start_row, dims.start_col))


def resolve_scalar(grid: Grid, spec: str, as_text: bool = False) -> int | float | str:
    if as_text:
        return resolve_text(grid, spec)
    return resolve_number(grid, spec)
