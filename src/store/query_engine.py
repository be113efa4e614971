"""Read-only queries over table rows.

Every query is a linear scan in row order and returns detached copies,
so callers cannot change table state without going through mutations.
Absent cells in under-populated rows read as empty strings.
"""

from __future__ import annotations

import re
from typing import Sequence

from core.types import Record

_NUMERIC_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def is_numeric_value(value: object) -> bool:
    """Return whether a value reads as a decimal number.

    Surrounding whitespace is ignored; booleans and None are not numeric.
    """
    if value is None or isinstance(value, bool):
        return False
    return _NUMERIC_PATTERN.fullmatch(str(value).strip()) is not None


def is_valid_key_value(value: object) -> bool:
    """Return whether a value is usable as a row key: non-empty and numeric."""
    return is_numeric_value(value)


def cell_value(row: Record, column: str) -> str:
    """Return a row cell, treating absent columns as empty."""
    return row.get(column, "")


def select_all(rows: Sequence[Record]) -> list[Record]:
    """Return copies of every row in order."""
    return [dict(row) for row in rows]


def search_exact(rows: Sequence[Record], column: str, value: object) -> list[Record]:
    """Return rows whose column equals the value as a string.

    Args:
        rows: Rows to scan.
        column: Column to compare.
        value: Expected value, compared after ``str()``.

    Returns:
        Copies of all matching rows in order.
    """
    expected = str(value)
    return [dict(row) for row in rows if cell_value(row, column) == expected]


def search_like(rows: Sequence[Record], column: str, substring: object) -> list[Record]:
    """Return rows whose column contains the substring, ignoring case.

    Args:
        rows: Rows to scan.
        column: Column to inspect.
        substring: Text to look for.

    Returns:
        Copies of all matching rows in order.
    """
    needle = str(substring).lower()
    return [dict(row) for row in rows if needle in cell_value(row, column).lower()]


def find_row_index(rows: Sequence[Record], value: object, column: str) -> int | None:
    """Return the index of the first row whose column equals the key value."""
    expected = str(value).strip()
    for index, row in enumerate(rows):
        if cell_value(row, column) == expected:
            return index
    return None


def find_by_key(rows: Sequence[Record], value: object, column: str) -> Record | None:
    """Return the first row whose key column equals the value.

    Keys match as trimmed text, not as numbers: "01" does not find "1".

    Args:
        rows: Rows to scan.
        value: Key value; must be non-empty numeric text.
        column: Key column name.

    Returns:
        Copy of the matching row, or None when the value is invalid or absent.
    """
    if not is_valid_key_value(value):
        return None
    index = find_row_index(rows, value, column)
    if index is None:
        return None
    return dict(rows[index])
