"""Python SDK for flat table operations.

This module exposes the record-oriented API over one table file.
Fallible operations return OperationResult values instead of raising,
and the most recent mutation outcome stays available as last_result.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Mapping

from core.config import StoreConfig
from core.constants import DEFAULT_HEADER_OFFSET, DEFAULT_ID_COLUMN
from core.errors import FlatStoreConfigError, FlatStoreError
from core.logging_config import get_logger
from core.types import OperationResult, Record, TableStatus
from store import id_allocator, mutation_engine, query_engine
from store.table_store import TableStore

_LOGGER = get_logger(__name__)


class FlatTable:
    """Primary SDK entry point for one semicolon-separated table file."""

    def __init__(
        self,
        path: str | Path,
        is_utf8: bool = True,
        header_offset: int = DEFAULT_HEADER_OFFSET,
        id_column: str = DEFAULT_ID_COLUMN,
    ) -> None:
        """Open a table file.

        A missing or unreadable file does not raise: the table records a
        sticky error, returns empty query results and fails every mutation.

        Args:
            path: Table file path.
            is_utf8: Whether the file is UTF-8; otherwise ISO-8859-1.
            header_offset: Zero-based index of the header line.
            id_column: Default key column for lookups and mutations.
        """
        self._store = TableStore(path, is_utf8=is_utf8, header_offset=header_offset)
        self._id_column = id_column
        self._last_result = (
            OperationResult.failure(self._store.error_message)
            if self._store.is_error
            else OperationResult.success()
        )

    @classmethod
    def from_config(cls, config: StoreConfig, path: str | Path | None = None) -> "FlatTable":
        """Open a table using runtime configuration defaults.

        Args:
            config: Runtime configuration.
            path: Optional path overriding ``config.table_path``.

        Returns:
            Opened table.

        Raises:
            FlatStoreConfigError: If no table path is available.
        """
        table_path = path if path is not None else config.table_path
        if table_path is None:
            raise FlatStoreConfigError(
                "No table path given. Pass a path or set FLATSTORE_PATH."
            )
        return cls(
            table_path,
            is_utf8=config.is_utf8,
            header_offset=config.header_offset,
            id_column=config.id_column,
        )

    @property
    def path(self) -> str:
        return self._store.path

    @property
    def is_file(self) -> bool:
        return self._store.is_file

    @property
    def is_utf8(self) -> bool:
        return self._store.is_utf8

    @property
    def is_error(self) -> bool:
        return self._store.is_error

    @property
    def error_message(self) -> str:
        return self._store.error_message

    @property
    def row_count(self) -> int:
        return self._store.row_count

    @property
    def columns(self) -> list[str]:
        return list(self._store.columns)

    @property
    def id_column(self) -> str:
        return self._id_column

    @property
    def last_result(self) -> OperationResult:
        return self._last_result

    def status(self) -> TableStatus:
        """Return a status summary of the table."""
        return self._store.status()

    def select_all(self) -> list[Record]:
        """Return copies of every row."""
        return query_engine.select_all(self._store.rows)

    def search_exact(self, column: str, value: object) -> list[Record]:
        """Return rows whose column equals the value exactly."""
        return query_engine.search_exact(self._store.rows, column, value)

    def search_like(self, column: str, substring: object) -> list[Record]:
        """Return rows whose column contains the substring, ignoring case."""
        return query_engine.search_like(self._store.rows, column, substring)

    def find_by_key(self, value: object, column: str | None = None) -> Record | None:
        """Return the first row whose key column equals the value.

        Keys match as trimmed text, not as numbers: "01" does not find "1".

        Args:
            value: Key value; empty or non-numeric values never match.
            column: Key column; defaults to the table's identifier column.

        Returns:
            Copy of the row, or None when not found.
        """
        return query_engine.find_by_key(self._store.rows, value, column or self._id_column)

    def next_id(self, column: str | None = None) -> int:
        """Return a fresh identifier: largest numeric value plus one."""
        return id_allocator.next_id(self._store.rows, column or self._id_column)

    def insert(self, row: Mapping[str, object]) -> OperationResult:
        """Append a row and persist the table.

        Identifier uniqueness is not checked here; take the identifier from
        ``next_id`` before inserting when the key must be unique.

        Args:
            row: Column-to-value mapping.

        Returns:
            Operation result.
        """
        return self._run("insert", lambda: mutation_engine.insert_row(self._store, row))

    def update(
        self,
        key_value: object,
        row: Mapping[str, object],
        column: str | None = None,
    ) -> OperationResult:
        """Replace the first row matching the key and persist the table.

        Args:
            key_value: Key value; must be non-empty numeric text.
            row: Complete replacement row.
            column: Key column; defaults to the table's identifier column.

        Returns:
            Operation result; failed when nothing matched.
        """
        key_column = column or self._id_column
        return self._run(
            "update",
            lambda: mutation_engine.update_row(self._store, key_value, row, key_column),
        )

    def delete(
        self,
        id_value: object,
        column: str | None = None,
        only_first: bool = True,
    ) -> OperationResult:
        """Delete rows matching the identifier and persist the table.

        The table is saved and the call succeeds even when nothing matched;
        ``affected`` reports how many rows were removed.

        Args:
            id_value: Identifier value; must be non-empty numeric text.
            column: Key column; defaults to the table's identifier column.
            only_first: Remove a single match instead of all matches.

        Returns:
            Operation result.
        """
        key_column = column or self._id_column
        return self._run(
            "delete",
            lambda: mutation_engine.delete_rows(self._store, id_value, key_column, only_first),
        )

    def _run(self, operation: str, mutation: Callable[[], int]) -> OperationResult:
        """Execute a mutation and convert store errors into a result."""
        try:
            affected = mutation()
        except FlatStoreError as error:
            _LOGGER.warning(
                "operation_rejected",
                operation=operation,
                path=self.path,
                error_type=type(error).__name__,
                error=str(error),
            )
            self._last_result = OperationResult.failure(str(error))
            return self._last_result
        self._last_result = OperationResult.success(affected)
        return self._last_result
