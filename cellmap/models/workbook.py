from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

"""Workbook model: decoded sheets as row-major grids.

A grid is a list of rows, each row a list of cell values (None, str, int,
float or whatever pandas produced for the cell). Rows may differ in length;
missing trailing cells are empty.
"""

__all__ = [
    "CellValue",
    "Grid",
    "MissingSheet",
    "Workbook",
]

CellValue = Any
Grid = list[list[CellValue]]


class MissingSheet(KeyError):
    """Raised when a sheet name has no decoded grid."""

    def __str__(self) -> str:
        return f"sheet not found: {self.args[0]!r}" if self.args else "sheet not found"


@dataclass(frozen=True)
class Workbook:
    """All sheets of one spreadsheet file plus the currently selected sheet."""
    sheet_names: list[str]
    sheets: dict[str, Grid]
    selected_sheet: str | None = None
    source: Path | None = field(default=None, compare=False)

    @staticmethod
    def from_grid(grid: Grid, sheet_name: str = "Sheet1") -> Workbook:
        return Workbook(sheet_names=[sheet_name], sheets={sheet_name: grid}, selected_sheet=sheet_name)

    def has_sheet(self, sheet: str) -> bool:
        return sheet in self.sheets

    def grid(self, sheet: str | None = None) -> Grid:
        """Return the grid for ``sheet`` (the selected sheet when None).

        Raises:
            MissingSheet: If the sheet does not exist or nothing is selected.
        """
        name = sheet if sheet is not None else self.selected_sheet
        if name is None or name not in self.sheets:
            raise MissingSheet(name)
        return self.sheets[name]

    def with_selected(self, sheet: str) -> Workbook:
        if sheet not in self.sheets:
            raise MissingSheet(sheet)
        return replace(self, selected_sheet=sheet)
