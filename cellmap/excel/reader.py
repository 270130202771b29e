from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.workbook import Grid, MissingSheet, Workbook

"""Workbook decoding: .xlsx file -> per-sheet grids.

Every sheet is read raw (no header row) so that grid[row][col] lines up with
the A1 coordinates the range configuration uses. Empty cells become None and
trailing empty cells of each row are dropped.
"""

__all__ = [
    "WorkbookReadError",
    "frame_to_grid",
    "preview_rows",
    "read_workbook",
]

logger = logging.getLogger(__name__)


class WorkbookReadError(Exception):
    """Raised when a workbook file cannot be opened or parsed."""


def _cell(value: Any) -> Any:
    # with keep_default_na=False empty cells arrive as ""
    if value is None or (isinstance(value, str) and value == ""):
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):  # pragma: no cover - array-like cell
        return value
    return value


def frame_to_grid(df: pd.DataFrame) -> Grid:
    """Convert a header-less DataFrame into a list of rows."""
    grid: Grid = []
    for raw in df.astype(object).itertuples(index=False, name=None):
        row = [_cell(v) for v in raw]
        while row and row[-1] is None:
            row.pop()
        grid.append(row)
    return grid


def read_workbook(
    path: Path,
    target_sheets: Iterable[str] | None = None,
    selected_sheet: str | None = None,
) -> Workbook:
    """Read every sheet of an Excel workbook.

    Parameters
    ----------
    path: workbook path
    target_sheets: restrict decoding to these sheet names (None = all sheets)
    selected_sheet: sheet to select; defaults to the first decoded sheet

    Raises
    ------
    WorkbookReadError: the file is missing or cannot be parsed
    MissingSheet: ``selected_sheet`` is not among the decoded sheets
    """
    if not path.exists():
        raise WorkbookReadError(f"workbook not found: {path}")
    wanted = set(target_sheets) if target_sheets is not None else None
    try:
        names: list[str] = []
        sheets: dict[str, Grid] = {}
        with pd.ExcelFile(path) as xls:
            for name in xls.sheet_names:
                if wanted is not None and str(name) not in wanted:
                    continue
                # keep_default_na=False: cell text such as "NA" stays text
                df = xls.parse(name, header=None, keep_default_na=False)
                names.append(str(name))
                sheets[str(name)] = frame_to_grid(df)
    except Exception as e:  # zip/xml/engine errors all surface as a read failure
        raise WorkbookReadError(f"failed to read {path.name}: {e}") from e

    if selected_sheet is not None and selected_sheet not in sheets:
        raise MissingSheet(selected_sheet)
    selected = selected_sheet if selected_sheet is not None else (names[0] if names else None)
    logger.debug(f"read {path.name}: sheets={names} selected={selected}")
    return Workbook(sheet_names=names, sheets=sheets, selected_sheet=selected, source=path)


def preview_rows(workbook: Workbook, sheet: str, limit: int = 3) -> list[list[Any]]:
    """Return the first ``limit`` non-empty rows of a sheet (for --inspect-data)."""
    rows = [r for r in workbook.grid(sheet) if any(c is not None and c != "" for c in r)]
    return rows[:limit]
