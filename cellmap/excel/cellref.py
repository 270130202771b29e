from __future__ import annotations

import re
from typing import NamedTuple

"""A1 cell reference algebra.

Column letters are bijective base-26 (A=1 .. Z=26, AA=27) and are exposed
as 0-based indices, so "A" -> 0, "Z" -> 25, "AA" -> 26. Row numbers are
1-based in the textual form and 0-based everywhere else.
"""

__all__ = [
    "CellIndex",
    "InvalidReference",
    "column_to_index",
    "format_cell_ref",
    "format_column_index",
    "parse_cell_ref",
]

_CELL_REF_PATTERN = re.compile(r"^([A-Z]+)([0-9]+)$")
_COLUMN_PATTERN = re.compile(r"^[A-Z]+$")


class InvalidReference(ValueError):
    """Raised when a cell reference does not match letters followed by digits."""


class CellIndex(NamedTuple):
    row: int
    col: int


def column_to_index(letters: str) -> int:
    """Convert column letters ("B", "AA") to a 0-based column index."""
    normalized = letters.strip().upper()
    if not _COLUMN_PATTERN.match(normalized):
        raise InvalidReference(f"invalid column letters: {letters!r}")
    acc = 0
    for char in normalized:
        acc = acc * 26 + (ord(char) - ord("A") + 1)
    return acc - 1


def format_column_index(col: int) -> str:
    """Convert a 0-based column index back to its column letters."""
    if col < 0:
        raise InvalidReference(f"column index must be non-negative: {col}")
    letters: list[str] = []
    n = col + 1
    while n > 0:
        letters.append(chr(ord("A") + (n - 1) % 26))
        n = (n - 1) // 26
    return "".join(reversed(letters))


def parse_cell_ref(ref: str) -> CellIndex:
    """Parse an A1 reference into a 0-based (row, col) index.

    Args:
        ref: Cell reference such as "B4". Surrounding whitespace is ignored
            and lower-case letters are accepted.

    Returns:
        CellIndex with 0-based row and column.

    Raises:
        InvalidReference: If the text is not letters followed by digits, or
            the row number is 0.
    """
    if not isinstance(ref, str):
        raise InvalidReference(f"cell reference must be a string: {ref!r}")
    match = _CELL_REF_PATTERN.match(ref.strip().upper())
    if match is None:
        raise InvalidReference(f"invalid cell reference: {ref!r}")
    letters, digits = match.groups()
    row_number = int(digits)
    if row_number < 1:
        raise InvalidReference(f"row number must start at 1: {ref!r}")
    return CellIndex(row=row_number - 1, col=column_to_index(letters))


def format_cell_ref(row: int, col: int) -> str:
    """Render a 0-based (row, col) pair as an A1 reference."""
    if row < 0:
        raise InvalidReference(f"row index must be non-negative: {row}")
    return f"{format_column_index(col)}{row + 1}"
