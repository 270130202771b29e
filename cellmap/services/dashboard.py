from __future__ import annotations

import logging

from ..excel.aggregate import resolve_number, resolve_text
from ..excel.extractor import extract_records
from ..models.config_models import RECON_VALUE_COLUMNS, DashboardConfig
from ..models.records import (
    DashboardReport,
    ReconSystem,
    StrikeSystem,
    SummaryStatistics,
)
from ..models.workbook import MissingSheet, Workbook

"""Dashboard extraction service.

Turns one workbook plus one DashboardConfig snapshot into strike systems,
recon systems and summary statistics. Every function takes the config as an
argument; nothing here keeps state between calls.
"""

__all__ = [
    "build_report",
    "extract_monthly_stats",
    "extract_recon_systems",
    "extract_strike_systems",
    "extract_summary_statistics",
]

logger = logging.getLogger(__name__)


def _selected(workbook: Workbook, sheet: str | None) -> str | None:
    name = sheet if sheet is not None else workbook.selected_sheet
    if name is None or not workbook.has_sheet(name):
        if name is not None:
            logger.warning(f"dashboard: {MissingSheet(name)}")
        return None
    return name


def extract_strike_systems(
    workbook: Workbook, config: DashboardConfig, sheet: str | None = None
) -> list[StrikeSystem]:
    """Read every strike entry; values are (hit, destroyed)."""
    name = _selected(workbook, sheet)
    if name is None:
        return []
    systems: list[StrikeSystem] = []
    for entry in config.strike:
        for record in entry.extract(workbook, name):
            systems.append(
                StrikeSystem(
                    name=record.name,
                    icon=entry.icon or "",
                    hit_count=record.value(0),
                    destroyed_count=record.value(1),
                )
            )
    return systems


def extract_recon_systems(
    workbook: Workbook, config: DashboardConfig, sheet: str | None = None
) -> list[ReconSystem]:
    """Read every recon entry; the single value is the detected count."""
    name = _selected(workbook, sheet)
    if name is None:
        return []
    systems: list[ReconSystem] = []
    for entry in config.recon:
        for record in entry.extract(workbook, name):
            systems.append(
                ReconSystem(
                    name=record.name,
                    icon=entry.icon or "",
                    detected_count=record.value(0),
                )
            )
    return systems


def extract_monthly_stats(workbook: Workbook, config: DashboardConfig) -> dict[str, int | float]:
    """Month name -> value from the monthly statistics sheet.

    The range's first column holds the month, the next one its value. A
    missing sheet or an unset range gives an empty mapping.
    """
    cells = config.summary
    if not cells.monthly_stats_sheet or not cells.monthly_stats_range:
        return {}
    try:
        grid = workbook.grid(cells.monthly_stats_sheet)
    except MissingSheet as e:
        logger.warning(f"monthly stats: {e}")
        return {}
    records = extract_records(grid, cells.monthly_stats_range, RECON_VALUE_COLUMNS)
    return {record.name: record.value(0) for record in records}


def extract_summary_statistics(
    workbook: Workbook, config: DashboardConfig, sheet: str | None = None
) -> SummaryStatistics:
    name = _selected(workbook, sheet)
    if name is None:
        return SummaryStatistics()
    grid = workbook.grid(name)
    cells = config.summary
    return SummaryStatistics(
        total_flights=resolve_number(grid, cells.total_flights) if cells.total_flights else 0,
        unique_targets=resolve_number(grid, cells.unique_targets) if cells.unique_targets else 0,
        monthly_stats=extract_monthly_stats(workbook, config),
        date_range_start=resolve_text(grid, cells.date_range_start) if cells.date_range_start else "",
        date_range_end=resolve_text(grid, cells.date_range_end) if cells.date_range_end else "",
    )


def build_report(
    workbook: Workbook, config: DashboardConfig, sheet: str | None = None
) -> DashboardReport:
    """Extract the full dashboard for one workbook."""
    name = _selected(workbook, sheet)
    file_name = workbook.source.name if workbook.source is not None else ""
    return DashboardReport(
        file=file_name,
        sheet=name,
        strike_systems=extract_strike_systems(workbook, config, name) if name else [],
        recon_systems=extract_recon_systems(workbook, config, name) if name else [],
        summary=extract_summary_statistics(workbook, config, name) if name else SummaryStatistics(),
    )
