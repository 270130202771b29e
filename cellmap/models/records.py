from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

"""Record models produced by extraction.

ExtractedRecord is the generic name/values pair coming out of a range scan.
The dashboard records give those values their meaning per asset class.
"""

__all__ = [
    "DashboardReport",
    "ExtractedRecord",
    "ReconSystem",
    "StrikeSystem",
    "SummaryStatistics",
]

Number = int | float


@dataclass(frozen=True)
class ExtractedRecord:
    """One named row of a range: the name cell and its value cells."""
    name: str
    values: tuple[Number, ...]

    def value(self, index: int) -> Number:
        return self.values[index] if index < len(self.values) else 0


@dataclass(frozen=True)
class StrikeSystem:
    name: str
    icon: str
    hit_count: Number
    destroyed_count: Number


@dataclass(frozen=True)
class ReconSystem:
    name: str
    icon: str
    detected_count: Number


@dataclass(frozen=True)
class SummaryStatistics:
    """Dashboard-wide figures read from aggregate cells."""
    total_flights: Number = 0
    unique_targets: Number = 0
    monthly_stats: dict[str, Number] = field(default_factory=dict)
    date_range_start: str = ""
    date_range_end: str = ""


@dataclass(frozen=True)
class DashboardReport:
    """Everything extracted from one workbook."""
    file: str
    sheet: str | None
    strike_systems: list[StrikeSystem]
    recon_systems: list[ReconSystem]
    summary: SummaryStatistics

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
