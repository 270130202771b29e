from __future__ import annotations

from dataclasses import dataclass, field

from .mapping import MappingConfiguration

"""Config dataclasses for the dashboard extractor.

DashboardConfig is the immutable snapshot every extraction reads from. The
flat dotted-key form used by config files and the store lives in
cellmap.config.loader.
"""

__all__ = [
    "RECON_VALUE_COLUMNS",
    "STRIKE_VALUE_COLUMNS",
    "AppConfig",
    "DashboardConfig",
    "SummaryCells",
]

STRIKE_VALUE_COLUMNS = 2  # hit, destroyed
RECON_VALUE_COLUMNS = 1  # detected


@dataclass(frozen=True)
class SummaryCells:
    """Aggregate cell specs for the summary panel ("" = not configured)."""
    total_flights: str = ""
    unique_targets: str = ""
    date_range_start: str = ""
    date_range_end: str = ""
    monthly_stats_sheet: str = ""
    monthly_stats_range: str = ""


@dataclass(frozen=True)
class DashboardConfig:
    """Range configuration for strike systems, recon systems and the summary panel."""
    strike: MappingConfiguration = field(default_factory=MappingConfiguration)
    recon: MappingConfiguration = field(default_factory=MappingConfiguration)
    summary: SummaryCells = field(default_factory=SummaryCells)


@dataclass(frozen=True)
class AppConfig:
    """Root configuration loaded from the YAML file."""
    source_directory: str  # Directory scanned for .xlsx workbooks
    dashboard: DashboardConfig
    sheet: str | None = None  # Sheet to select instead of the first one
