from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.issue_record import IssueRecord

"""Issue log buffering.

- JSON Lines, fixed schema (IssueRecord fields only)
- One file per run: logs/issues-YYYYMMDD-HHMMSS.log (UTC), created on first flush
- No thread safety needed (serial execution)
"""

__all__ = [
    "IssueLogBuffer",
    "IssueRecord",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class IssueLogBuffer:
    """In-memory buffer for issue records. flush() appends them as JSON Lines."""

    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[IssueRecord] = []
        self._logs_dir = logs_dir if logs_dir is not None else LOGS_DIR
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"issues-{stamp}.log"
        return self._file_path

    @property
    def records(self) -> list[IssueRecord]:
        return list(self._records)

    def append(self, record: IssueRecord) -> None:
        self._records.append(record)

    def __len__(self) -> int:
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records; returns the file path, or None if nothing was buffered."""
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
