from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import validate_ranges
from ..excel.reader import WorkbookReadError, read_workbook
from ..logging.error_log import IssueLogBuffer
from ..models.config_models import AppConfig
from ..models.issue_record import INVALID_RANGE, MISSING_SHEET, READ_ERROR, IssueRecord
from ..models.processing_result import FileStat, ProcessingResult
from ..models.records import DashboardReport
from ..models.workbook import MissingSheet
from .dashboard import build_report
from .progress import ProgressTracker

logger = logging.getLogger(__name__)

"""Service orchestration for a batch run.

Scans the configured directory for workbooks, builds one dashboard report per
workbook, records recoverable problems in the issue log and aggregates the
results for the SUMMARY line.
"""


class ProcessingError(Exception):
    """Fatal processing error (the run cannot start)."""


def scan_workbooks(directory: Path) -> list[Path]:
    """Return the .xlsx files of ``directory`` (non-recursive, sorted by name).

    Excel lock files ("~$name.xlsx") are skipped.

    Raises:
        ProcessingError: If the directory is missing or unreadable.
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    try:
        return sorted(
            p for p in directory.iterdir()
            if p.is_file() and p.suffix.lower() == ".xlsx" and not p.name.startswith("~$")
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def _record_config_issues(config: AppConfig, issues: IssueLogBuffer) -> None:
    for key, spec in validate_ranges(config.dashboard):
        logger.warning(f"config: invalid range {key}={spec!r}")
        issues.append(IssueRecord.create("", "", key, INVALID_RANGE, f"invalid range: {spec}"))


def _process_file(
    path: Path, config: AppConfig, issues: IssueLogBuffer, sheet: str | None
) -> DashboardReport:
    workbook = read_workbook(path, selected_sheet=sheet)
    monthly_sheet = config.dashboard.summary.monthly_stats_sheet
    if monthly_sheet and not workbook.has_sheet(monthly_sheet):
        issues.append(
            IssueRecord.create(
                path.name, monthly_sheet, "summary.monthlyStatsSheet", MISSING_SHEET,
                f"monthly statistics sheet not found: {monthly_sheet}",
            )
        )
    return build_report(workbook, config.dashboard)


def process_all(
    config: AppConfig,
    sheet: str | None = None,
    issues: IssueLogBuffer | None = None,
) -> ProcessingResult:
    """Build dashboard reports for every workbook in the configured directory.

    Args:
        config: Loaded application config.
        sheet: Sheet to select in each workbook; overrides ``config.sheet``.
        issues: Issue buffer to fill (a fresh one is created if None). It is
            flushed before returning.

    Returns:
        ProcessingResult with per-file stats and reports.

    Raises:
        ProcessingError: If the source directory cannot be scanned.
    """
    start_time = datetime.now(UTC)
    issues = issues if issues is not None else IssueLogBuffer()
    selected = sheet if sheet is not None else config.sheet

    paths = scan_workbooks(Path(config.source_directory))
    _record_config_issues(config, issues)

    file_stats: list[FileStat] = []
    reports: list[DashboardReport] = []
    with ProgressTracker(len(paths)) as progress:
        for path in paths:
            progress.start_file(path)
            t0 = time.perf_counter()
            try:
                report = _process_file(path, config, issues, selected)
            except WorkbookReadError as e:
                logger.error(f"{path.name}: {e}")
                issues.append(IssueRecord.create(path.name, "", "", READ_ERROR, str(e)))
                file_stats.append(
                    FileStat(path.name, "failed", 0, 0, time.perf_counter() - t0, error=str(e))
                )
                progress.finish_file(success=False)
                continue
            except MissingSheet as e:
                logger.error(f"{path.name}: {e}")
                issues.append(IssueRecord.create(path.name, str(e.args[0]), "", MISSING_SHEET, str(e)))
                file_stats.append(
                    FileStat(path.name, "failed", 0, 0, time.perf_counter() - t0, error=str(e))
                )
                progress.finish_file(success=False)
                continue

            reports.append(report)
            file_stats.append(
                FileStat(
                    file_name=path.name,
                    status="success",
                    strike_records=len(report.strike_systems),
                    recon_records=len(report.recon_systems),
                    elapsed_seconds=time.perf_counter() - t0,
                )
            )
            progress.set_postfix(strike=len(report.strike_systems), recon=len(report.recon_systems))
            progress.finish_file(success=True)

    issue_path = issues.flush()
    if issue_path is not None:
        logger.info(f"issues written to {issue_path}")

    end_time = datetime.now(UTC)
    return ProcessingResult(
        success_files=sum(1 for s in file_stats if s.status == "success"),
        failed_files=sum(1 for s in file_stats if s.status == "failed"),
        strike_records=sum(s.strike_records for s in file_stats),
        recon_records=sum(s.recon_records for s in file_stats),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
        reports=reports,
        issue_log=str(issue_path) if issue_path is not None else None,
    )
