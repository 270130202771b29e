from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, replace

from ..excel.extractor import extract_records
from ..excel.ranges import CellRange, parse_range_string
from .records import ExtractedRecord
from .workbook import Grid, MissingSheet, Workbook

"""Mapping configuration: named entities bound to one or more cell ranges.

Entries and configurations are immutable. Updating a configuration returns a
new one, so a caller holding a configuration never sees it change under an
extraction.
"""

__all__ = [
    "MappingConfiguration",
    "MappingEntry",
    "create_entry",
]

logger = logging.getLogger(__name__)


def _as_workbook(source: Workbook | Grid) -> Workbook:
    if isinstance(source, Workbook):
        return source
    return Workbook.from_grid(source)


@dataclass(frozen=True)
class MappingEntry:
    """A named entity read from ``ranges`` with ``value_columns`` values per row.

    The first range's leftmost column is the canonical name column.
    """
    name: str
    ranges: tuple[CellRange, ...]
    value_columns: int
    icon: str | None = None

    def range_strings(self) -> list[str]:
        return [str(r) for r in self.ranges]

    def extract(self, source: Workbook | Grid, sheet: str | None = None) -> list[ExtractedRecord]:
        """Extract records from every range of this entry, in range order.

        A range's own sheet wins over ``sheet``, which wins over the
        workbook's selected sheet. Ranges pointing at a missing sheet
        contribute nothing.
        """
        workbook = _as_workbook(source)
        records: list[ExtractedRecord] = []
        for cell_range in self.ranges:
            target = cell_range.sheet or sheet
            try:
                grid = workbook.grid(target)
            except MissingSheet as e:
                logger.warning(f"mapping '{self.name}': {e}")
                continue
            records.extend(extract_records(grid, cell_range, self.value_columns))
        return records


def create_entry(
    name: str,
    range_strings: str | Sequence[str],
    value_columns: int,
    icon: str | None = None,
    sheet: str | None = None,
) -> MappingEntry:
    """Build a MappingEntry, parsing each range string.

    Raises:
        ValueError: If ``value_columns`` is below 1 or no range is given.
    """
    if value_columns < 1:
        raise ValueError(f"value_columns must be >= 1 (got {value_columns}) for '{name}'")
    if isinstance(range_strings, str):
        range_strings = [range_strings]
    ranges = tuple(parse_range_string(text, sheet) for text in range_strings)
    if not ranges:
        raise ValueError(f"mapping '{name}' needs at least one range")
    return MappingEntry(name=name, ranges=ranges, value_columns=value_columns, icon=icon)


@dataclass(frozen=True)
class MappingConfiguration:
    """Ordered collection of MappingEntry with unique names."""
    entries: tuple[MappingEntry, ...] = ()

    def __post_init__(self) -> None:
        names = [e.name for e in self.entries]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"duplicate mapping names: {duplicates}")

    def __iter__(self) -> Iterator[MappingEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def names(self) -> list[str]:
        return [e.name for e in self.entries]

    def find(self, name: str) -> MappingEntry | None:
        for entry in self.entries:
            if entry.name == name:
                return entry
        return None

    def update(
        self,
        name: str,
        range_strings: str | Sequence[str] | None = None,
        value_columns: int | None = None,
        icon: str | None = None,
        sheet: str | None = None,
    ) -> MappingConfiguration:
        """Return a configuration with ``name`` replaced or appended.

        An existing entry keeps its position, and its icon unless ``icon`` is
        given. A new name is appended and needs both ranges and value_columns.
        """
        current = self.find(name)
        if current is None:
            if range_strings is None or value_columns is None:
                raise ValueError(f"new mapping '{name}' needs ranges and value_columns")
            entry = create_entry(name, range_strings, value_columns, icon=icon, sheet=sheet)
            return MappingConfiguration(self.entries + (entry,))

        if range_strings is not None:
            replacement = create_entry(
                name,
                range_strings,
                value_columns if value_columns is not None else current.value_columns,
                icon=icon if icon is not None else current.icon,
                sheet=sheet,
            )
        else:
            replacement = replace(
                current,
                value_columns=value_columns if value_columns is not None else current.value_columns,
                icon=icon if icon is not None else current.icon,
            )
            if replacement.value_columns < 1:
                raise ValueError(f"value_columns must be >= 1 for '{name}'")
        return MappingConfiguration(
            tuple(replacement if e.name == name else e for e in self.entries)
        )

    def remove(self, name: str) -> MappingConfiguration:
        return MappingConfiguration(tuple(e for e in self.entries if e.name != name))

    def extract_all(
        self, source: Workbook | Grid, sheet: str | None = None
    ) -> dict[str, list[ExtractedRecord]]:
        """Run every entry against ``source`` keyed by entry name, in entry order."""
        workbook = _as_workbook(source)
        return {entry.name: entry.extract(workbook, sheet) for entry in self.entries}
