from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .records import DashboardReport

"""Processing result models for a batch run over a directory of workbooks."""


@dataclass(frozen=True)
class FileStat:
    """Per-file processing statistics."""
    file_name: str
    status: str  # success/failed
    strike_records: int
    recon_records: int
    elapsed_seconds: float
    error: str | None = None


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results of one run, used for the SUMMARY line and the JSON report."""
    success_files: int
    failed_files: int
    strike_records: int
    recon_records: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] = field(default_factory=list)
    reports: list[DashboardReport] = field(default_factory=list)
    issue_log: str | None = None  # path of the flushed issue log, if any issues

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files
