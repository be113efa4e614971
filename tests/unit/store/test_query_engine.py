"""Unit tests for read-only table queries."""

from __future__ import annotations

import pytest

from core.types import Record
from store.query_engine import (
    find_by_key,
    is_numeric_value,
    search_exact,
    search_like,
    select_all,
)


def _rows() -> list[Record]:
    return [
        {"id": "1", "name": "Anna", "city": "Berlin"},
        {"id": "2", "name": "Bob", "city": "Hamburg"},
        {"id": "3", "name": "Joanne"},
        {"id": "2", "name": "Bobby", "city": "Kiel"},
    ]


@pytest.mark.parametrize("value", ["1", " 42 ", "-3", "+7", "2.5", ".5", "1e3", 7, 1.5])
def test_is_numeric_value_accepts_numbers(value: object) -> None:
    """Decimal integers, floats and exponents should count as numeric."""
    assert is_numeric_value(value)


@pytest.mark.parametrize("value", ["", "  ", "abc", "1a", "0x1A", "1_000", "nan", None, True])
def test_is_numeric_value_rejects_non_numbers(value: object) -> None:
    """Empty, textual and special values should not count as numeric."""
    assert not is_numeric_value(value)


def test_select_all_returns_copies() -> None:
    """Mutating a returned row should not touch the source rows."""
    rows = _rows()

    selected = select_all(rows)
    selected[0]["name"] = "changed"

    assert rows[0]["name"] == "Anna"


def test_search_exact_returns_all_matches_in_order() -> None:
    """Exact search should return every equal row."""
    matches = search_exact(_rows(), "id", "2")

    assert [row["name"] for row in matches] == ["Bob", "Bobby"]


def test_search_exact_is_case_sensitive() -> None:
    """Exact search compares strings verbatim."""
    assert search_exact(_rows(), "name", "bob") == []


def test_search_exact_treats_absent_cells_as_empty() -> None:
    """Absent cells in short rows should compare as empty strings."""
    matches = search_exact(_rows(), "city", "")

    assert [row["name"] for row in matches] == ["Joanne"]


def test_search_like_ignores_case() -> None:
    """Substring search should lower-case both sides."""
    matches = search_like(_rows(), "name", "ann")

    assert [row["name"] for row in matches] == ["Anna", "Joanne"]


def test_search_like_on_unknown_column_finds_nothing() -> None:
    """Searching a column no row has should not raise."""
    assert search_like(_rows(), "zip", "1") == []


def test_find_by_key_returns_first_match() -> None:
    """Lookup should stop at the first matching row."""
    row = find_by_key(_rows(), "2", "id")

    assert row == {"id": "2", "name": "Bob", "city": "Hamburg"}


def test_find_by_key_accepts_integer_value() -> None:
    """Integer keys should compare against their text form."""
    row = find_by_key(_rows(), 3, "id")

    assert row is not None and row["name"] == "Joanne"


@pytest.mark.parametrize("value", ["", "abc", None])
def test_find_by_key_rejects_invalid_values(value: object) -> None:
    """Empty or non-numeric keys should return not-found."""
    assert find_by_key(_rows(), value, "id") is None


def test_find_by_key_returns_none_when_absent() -> None:
    """A valid key without a matching row should return not-found."""
    assert find_by_key(_rows(), "99", "id") is None


def test_find_by_key_compares_keys_as_text() -> None:
    """Keys match as trimmed text, so leading zeros do not match."""
    assert find_by_key(_rows(), "01", "id") is None
    assert find_by_key(_rows(), " 1 ", "id") == _rows()[0]
