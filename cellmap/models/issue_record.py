from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""IssueRecord model for the structured issue log.

Recoverable problems (a range that does not parse, a sheet that is missing,
a workbook that cannot be read) do not stop extraction; they are recorded
here and written out as JSON Lines.
"""

__all__ = [
    "INVALID_RANGE",
    "MISSING_SHEET",
    "READ_ERROR",
    "IssueRecord",
]

INVALID_RANGE = "INVALID_RANGE"
MISSING_SHEET = "MISSING_SHEET"
READ_ERROR = "READ_ERROR"


@dataclass(frozen=True)
class IssueRecord:
    """Structured issue record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Workbook file name ("" when the issue is not tied to a file)
        sheet: Sheet name ("" when unknown)
        reference: Config key or range the issue is about ("" when n/a)
        error_type: Issue classification in UPPER_SNAKE_CASE format
        message: Human readable description
    """
    timestamp: str
    file: str
    sheet: str
    reference: str
    error_type: str
    message: str

    @staticmethod
    def create(file: str, sheet: str, reference: str, error_type: str, message: str) -> IssueRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return IssueRecord(
            timestamp=ts,
            file=file,
            sheet=sheet,
            reference=reference,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
