"""Shared typed models.

This module defines the table snapshot and operation result models
used by the codec, store, engines and SDK layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field

Record = dict[str, str]


@dataclass(frozen=True)
class TableSnapshot:
    """Immutable view of one loaded table file.

    Attributes:
        columns: Ordered, sanitized header names.
        rows: Records in file order.
        preamble: Raw lines that precede the header offset.
    """

    columns: tuple[str, ...] = ()
    rows: tuple[Record, ...] = ()
    preamble: tuple[str, ...] = ()

    def with_rows(self, rows: list[Record]) -> "TableSnapshot":
        """Return a copy of the snapshot holding different rows."""
        return TableSnapshot(columns=self.columns, rows=tuple(rows), preamble=self.preamble)

    def copy_rows(self) -> list[Record]:
        """Return detached copies of every row."""
        return [dict(row) for row in self.rows]


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a fallible table operation.

    Attributes:
        ok: Whether the operation succeeded.
        error: Failure description, empty on success.
        affected: Number of rows changed by a mutation.
    """

    ok: bool
    error: str = ""
    affected: int = 0

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, affected: int = 0) -> "OperationResult":
        """Build a successful result."""
        return cls(ok=True, affected=affected)

    @classmethod
    def failure(cls, error: str) -> "OperationResult":
        """Build a failed result."""
        return cls(ok=False, error=error)


@dataclass(frozen=True)
class TableStatus:
    """Status summary of an open table.

    Attributes:
        path: Backing file path.
        is_file: Whether the path resolved to a file at construction.
        is_utf8: Whether the file is read and written as UTF-8.
        is_error: Whether the table carries a sticky construction error.
        error_message: Sticky construction error text.
        row_count: Number of rows held in memory.
        columns: Ordered header names.
    """

    path: str
    is_file: bool
    is_utf8: bool
    is_error: bool
    error_message: str
    row_count: int
    columns: tuple[str, ...] = field(default_factory=tuple)
