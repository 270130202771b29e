from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from cellmap.config.loader import load_config
from cellmap.logging.error_log import IssueLogBuffer
from cellmap.models.processing_result import ProcessingResult
from cellmap.services.orchestrator import ProcessingError, process_all, scan_workbooks


def test_scan_workbooks_filters_and_sorts(temp_workdir: Path) -> None:
    """Only .xlsx files are returned, sorted, without Excel lock files."""
    data_dir = temp_workdir / "data"
    (data_dir / "b.xlsx").write_bytes(b"x")
    (data_dir / "a.XLSX").write_bytes(b"x")
    (data_dir / "~$a.xlsx").write_bytes(b"lock")
    (data_dir / "readme.txt").write_text("ignore this")
    (data_dir / "old.xls").write_bytes(b"old format")
    (data_dir / "sub.xlsx").mkdir()

    assert [p.name for p in scan_workbooks(data_dir)] == ["a.XLSX", "b.xlsx"]


def test_scan_workbooks_directory_not_found() -> None:
    with pytest.raises(ProcessingError, match="Directory not found"):
        scan_workbooks(Path("/non/existent/path"))


def test_scan_workbooks_not_a_directory(temp_workdir: Path) -> None:
    f = temp_workdir / "file.txt"
    f.write_text("x")
    with pytest.raises(ProcessingError, match="not a directory"):
        scan_workbooks(f)


def test_process_all_empty_directory(write_config: Path) -> None:
    config = load_config(write_config)

    result = process_all(config)

    assert isinstance(result, ProcessingResult)
    assert result.total_files == 0
    assert result.strike_records == 0
    assert result.file_stats == []
    assert result.issue_log is None


def test_process_all_success(temp_workdir: Path, write_config: Path, make_excel, dashboard_sheets) -> None:
    make_excel(temp_workdir / "data" / "one.xlsx", dashboard_sheets)
    make_excel(temp_workdir / "data" / "two.xlsx", dashboard_sheets)
    config = load_config(write_config)

    result = process_all(config)

    assert result.success_files == 2
    assert result.failed_files == 0
    assert result.strike_records == 4
    assert result.recon_records == 4
    assert [r.file for r in result.reports] == ["one.xlsx", "two.xlsx"]
    assert result.reports[0].summary.unique_targets == 15
    assert [s.status for s in result.file_stats] == ["success", "success"]
    assert result.issue_log is None


def test_process_all_partial_failure(temp_workdir: Path, write_config: Path, make_excel, dashboard_sheets) -> None:
    make_excel(temp_workdir / "data" / "good.xlsx", dashboard_sheets)
    (temp_workdir / "data" / "broken.xlsx").write_bytes(b"not a workbook")
    config = load_config(write_config)

    result = process_all(config)

    assert result.success_files == 1
    assert result.failed_files == 1
    failed = [s for s in result.file_stats if s.status == "failed"]
    assert failed[0].file_name == "broken.xlsx"
    assert failed[0].error

    assert result.issue_log is not None
    lines = Path(result.issue_log).read_text(encoding="utf-8").splitlines()
    records = [json.loads(line) for line in lines]
    assert [(r["file"], r["error_type"]) for r in records] == [("broken.xlsx", "READ_ERROR")]


def test_process_all_unknown_sheet_fails_file(temp_workdir: Path, write_config: Path, make_excel, dashboard_sheets) -> None:
    make_excel(temp_workdir / "data" / "one.xlsx", dashboard_sheets)
    config = load_config(write_config)
    issues = IssueLogBuffer(logs_dir=temp_workdir / "logs")

    with patch.object(issues, "flush", return_value=None):
        result = process_all(config, sheet="Nope", issues=issues)

    assert result.failed_files == 1
    assert [(r.sheet, r.error_type) for r in issues.records] == [("Nope", "MISSING_SHEET")]


def test_process_all_records_config_and_monthly_issues(
    temp_workdir: Path, make_excel, dashboard_sheets
) -> None:
    cfg_path = temp_workdir / "config" / "cellmap.yml"
    cfg_path.write_text(
        "source_directory: ./data\n"
        "cell_mappings:\n"
        "  strike.bad: B4:??\n"
        "  summary.monthlyStatsSheet: Absent\n",
        encoding="utf-8",
    )
    make_excel(temp_workdir / "data" / "one.xlsx", {"Report": dashboard_sheets["Report"]})
    issues = IssueLogBuffer(logs_dir=temp_workdir / "logs")

    with patch.object(issues, "flush", return_value=None):
        result = process_all(load_config(cfg_path), issues=issues)

    assert result.success_files == 1
    assert result.strike_records == 0
    assert [(r.reference, r.error_type) for r in issues.records] == [
        ("strike.bad", "INVALID_RANGE"),
        ("summary.monthlyStatsSheet", "MISSING_SHEET"),
    ]


def test_process_all_sheet_from_config(temp_workdir: Path, make_excel) -> None:
    cfg_path = temp_workdir / "config" / "cellmap.yml"
    cfg_path.write_text(
        "source_directory: ./data\n"
        "sheet: Second\n"
        "cell_mappings:\n"
        "  recon.x: A1:B2\n",
        encoding="utf-8",
    )
    make_excel(
        temp_workdir / "data" / "one.xlsx",
        {"First": [["skip", 1]], "Second": [["Орлан", 3], ["РЛС", 4]]},
    )

    result = process_all(load_config(cfg_path))

    assert result.reports[0].sheet == "Second"
    assert [(r.name, r.detected_count) for r in result.reports[0].recon_systems] == [
        ("Орлан", 3),
        ("РЛС", 4),
    ]
