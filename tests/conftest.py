# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest

from cellmap.logging.init import reset_logging

# Two unrelated name/value groups share sheet row 2 (0-based row 1).
SIDE_BY_SIDE_GRID = [
    ["", "", "", "", "", ""],
    ["", "ОС РОВ", 7, "Склади", 0, ""],
    ["", "Танки", 5, 3, "", ""],
    ["", "РЛС", 8, "", "", ""],
]


@pytest.fixture(autouse=True)
def _fresh_logging():
    # setup_logging binds sys.stdout once; capsys swaps it per test
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def side_by_side_grid() -> list[list[object]]:
    return [list(row) for row in SIDE_BY_SIDE_GRID]


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("CELLMAP_CONFIG", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
cell_mappings:
  strike.Ударні: B4:D6
  recon.Розвідка: B9:C10
  summary.totalFlights: B12
  summary.uniqueTargets: B13+C13
  summary.dateRangeStart: B15
  summary.dateRangeEnd: B16
  summary.monthlyStatsSheet: Monthly
  summary.monthlyStatsRange: A2:B4
icons:
  Ударні: rocket
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "cellmap.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def _make_excel(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
    return path


@pytest.fixture()
def make_excel() -> Callable[[Path, dict[str, list[list[object]]]], Path]:
    return _make_excel


@pytest.fixture()
def dashboard_sheets() -> dict[str, list[list[object]]]:
    """Workbook laid out for sample_config_yaml (rows are 1-based in comments)."""
    return {
        "Report": [
            ["Звіт", None, None, None],                # 1
            [None, None, None, None],                  # 2
            [None, "Назва", "Уражено", "Знищено"],      # 3
            [None, "Танки", 5, 3],                     # 4
            [None, "ББМ", 2, 1],                       # 5
            [None, None, 9, 9],                        # 6 no name -> skipped
            [None, None, None, None],                  # 7
            [None, "Розвідка", None, None],            # 8
            [None, "Орлан", 4, "Склади"],              # 9 D is outside B9:C10
            [None, "РЛС", 8, None],                    # 10
            [None, None, None, None],                  # 11
            [None, 120, None, None],                   # 12
            [None, 10, 5, None],                       # 13
            [None, None, None, None],                  # 14
            [None, "01.01.2024", None, None],          # 15
            [None, "31.03.2024", None, None],          # 16
        ],
        "Monthly": [
            ["Місяць", "Польоти"],
            ["Січень", 40],
            ["Лютий", 35],
            ["Березень", 45],
        ],
    }
