"""Domain models for the dashboard extractor.

Only leaf models are re-exported here. The mapping and config models depend
on cellmap.excel and are imported from their own modules
(cellmap.models.mapping, cellmap.models.config_models).
"""

from .issue_record import IssueRecord
from .processing_result import FileStat, ProcessingResult
from .records import (
    DashboardReport,
    ExtractedRecord,
    ReconSystem,
    StrikeSystem,
    SummaryStatistics,
)
from .workbook import Grid, MissingSheet, Workbook

__all__ = [
    # Extraction records
    "ExtractedRecord",
    "StrikeSystem",
    "ReconSystem",
    "SummaryStatistics",
    "DashboardReport",
    # Sheet data
    "Grid",
    "MissingSheet",
    "Workbook",
    # Processing models
    "FileStat",
    "IssueRecord",
    "ProcessingResult",
]
