from __future__ import annotations

from ..models.processing_result import ProcessingResult
from ..models.records import DashboardReport

"""SUMMARY line and per-report log line rendering."""


def _format_seconds(seconds: float) -> str:
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        # avoid scientific notation
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return f"{seconds:.2f}".rstrip("0").rstrip(".")


def render_summary_line(result: ProcessingResult) -> str:
    """Render the SUMMARY line for a run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     success_files=2, failed_files=1, strike_records=10, recon_records=3,
        ...     start_time=t, end_time=t, elapsed_seconds=1.5,
        ... )
        >>> render_summary_line(result)
        'SUMMARY files=3 success=2 failed=1 strike=10 recon=3 elapsed_sec=1.5'
    """
    return (
        f"SUMMARY files={result.total_files} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"strike={result.strike_records} "
        f"recon={result.recon_records} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )


def _number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def render_report_lines(report: DashboardReport) -> list[str]:
    """Human readable lines for one report (logged at INFO by the CLI)."""
    lines = [f"{report.file} sheet={report.sheet or '-'}"]
    for s in report.strike_systems:
        lines.append(f"  strike {s.name}: hit={_number(s.hit_count)} destroyed={_number(s.destroyed_count)}")
    for r in report.recon_systems:
        lines.append(f"  recon {r.name}: detected={_number(r.detected_count)}")
    summary = report.summary
    lines.append(
        f"  summary flights={_number(summary.total_flights)} "
        f"targets={_number(summary.unique_targets)} "
        f"dates={summary.date_range_start or '-'}..{summary.date_range_end or '-'}"
    )
    for month, value in summary.monthly_stats.items():
        lines.append(f"  month {month}: {_number(value)}")
    return lines
