from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from cellmap.excel.reader import WorkbookReadError, frame_to_grid, preview_rows, read_workbook
from cellmap.models.workbook import MissingSheet, Workbook


def test_read_workbook_keeps_a1_alignment(temp_workdir: Path, make_excel, dashboard_sheets):
    path = make_excel(temp_workdir / "data" / "report.xlsx", dashboard_sheets)

    workbook = read_workbook(path)

    assert workbook.sheet_names == ["Report", "Monthly"]
    assert workbook.selected_sheet == "Report"
    assert workbook.source == path
    grid = workbook.grid()
    # B4 -> grid[3][1]
    assert grid[3][1] == "Танки"
    assert grid[3][2] == 5
    # blank row 2 is preserved and trimmed to nothing
    assert grid[1] == []
    assert grid[11][1] == 120
    assert grid[14][1] == "01.01.2024"


def test_read_workbook_selected_sheet(temp_workdir: Path, make_excel, dashboard_sheets):
    path = make_excel(temp_workdir / "data" / "report.xlsx", dashboard_sheets)
    workbook = read_workbook(path, selected_sheet="Monthly")
    assert workbook.selected_sheet == "Monthly"
    assert workbook.grid()[1] == ["Січень", 40]


def test_read_workbook_unknown_selected_sheet(temp_workdir: Path, make_excel, dashboard_sheets):
    path = make_excel(temp_workdir / "data" / "report.xlsx", dashboard_sheets)
    with pytest.raises(MissingSheet):
        read_workbook(path, selected_sheet="Nope")


def test_read_workbook_target_sheets(temp_workdir: Path, make_excel, dashboard_sheets):
    path = make_excel(temp_workdir / "data" / "report.xlsx", dashboard_sheets)
    workbook = read_workbook(path, target_sheets=["Monthly"])
    assert workbook.sheet_names == ["Monthly"]
    assert not workbook.has_sheet("Report")


def test_read_workbook_missing_file(temp_workdir: Path):
    with pytest.raises(WorkbookReadError):
        read_workbook(temp_workdir / "data" / "absent.xlsx")


def test_read_workbook_corrupt_file(temp_workdir: Path):
    path = temp_workdir / "data" / "broken.xlsx"
    path.write_bytes(b"not a zip archive")
    with pytest.raises(WorkbookReadError):
        read_workbook(path)


def test_frame_to_grid_converts_nan_and_trims():
    df = pd.DataFrame([["a", 1.0, None], [None, None, None], ["", "x", ""]])
    assert frame_to_grid(df) == [["a", 1.0], [], [None, "x"]]


def test_preview_rows_skips_empty_rows():
    workbook = Workbook.from_grid([[], ["a"], [None, None], ["b", 2], ["c"], ["d"]])
    assert preview_rows(workbook, "Sheet1", limit=3) == [["a"], ["b", 2], ["c"]]


def test_workbook_grid_missing_sheet_message():
    workbook = Workbook.from_grid([["a"]])
    with pytest.raises(MissingSheet) as excinfo:
        workbook.grid("Other")
    assert str(excinfo.value) == "sheet not found: 'Other'"
    assert workbook.with_selected("Sheet1").selected_sheet == "Sheet1"


def test_na_like_text_is_kept(temp_workdir: Path, make_excel):
    path = make_excel(temp_workdir / "data" / "na.xlsx", {"S": [["NA", 1], ["N/A", 2], ["null", 3]]})
    assert read_workbook(path).grid() == [["NA", 1], ["N/A", 2], ["null", 3]]
