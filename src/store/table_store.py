"""In-memory table state backed by one table file.

This module owns the loaded header and rows for a single file.
It performs the construction load and the two-phase persist used by
mutations: write the candidate table, reload it from disk, and only
then replace the live state.
"""

from __future__ import annotations

from pathlib import Path

from core.constants import DEFAULT_HEADER_OFFSET, LOAD_FAILED_MESSAGE
from core.errors import FlatStoreError, FlatStorePersistError
from core.logging_config import get_logger
from core.types import Record, TableSnapshot, TableStatus
from store.text_codec import read_table_file, write_table_file

_LOGGER = get_logger(__name__)


class TableStore:
    """Holds the header and rows of one table file.

    A failed construction load leaves a sticky error: the store keeps an
    empty table and refuses every later commit until it is rebuilt.
    """

    def __init__(
        self,
        path: str | Path,
        is_utf8: bool = True,
        header_offset: int = DEFAULT_HEADER_OFFSET,
    ) -> None:
        """Open a table file and load it once.

        Args:
            path: Table file path.
            is_utf8: Whether the file is UTF-8; otherwise ISO-8859-1.
            header_offset: Zero-based index of the header line.
        """
        self._path = Path(path)
        self._is_utf8 = is_utf8
        self._header_offset = header_offset
        self._snapshot = TableSnapshot()
        self._error_message = ""
        self._is_file = self._path.is_file()
        self._load()

    @property
    def path(self) -> str:
        return str(self._path)

    @property
    def is_file(self) -> bool:
        return self._is_file

    @property
    def is_utf8(self) -> bool:
        return self._is_utf8

    @property
    def header_offset(self) -> int:
        return self._header_offset

    @property
    def is_error(self) -> bool:
        return bool(self._error_message)

    @property
    def error_message(self) -> str:
        return self._error_message

    @property
    def row_count(self) -> int:
        return len(self._snapshot.rows)

    @property
    def columns(self) -> tuple[str, ...]:
        return self._snapshot.columns

    @property
    def rows(self) -> tuple[Record, ...]:
        """Live rows; read-only by convention, queries hand out copies."""
        return self._snapshot.rows

    @property
    def snapshot(self) -> TableSnapshot:
        return self._snapshot

    def set_columns(self, columns: list[str] | tuple[str, ...]) -> None:
        """Replace the in-memory header without persisting."""
        self._snapshot = TableSnapshot(
            columns=tuple(columns),
            rows=self._snapshot.rows,
            preamble=self._snapshot.preamble,
        )

    def set_rows(self, rows: list[Record]) -> None:
        """Replace the in-memory rows without persisting."""
        self._snapshot = self._snapshot.with_rows([dict(row) for row in rows])

    def add_row(self, row: Record) -> None:
        """Append one row in memory without persisting."""
        self._snapshot = self._snapshot.with_rows(self._snapshot.copy_rows() + [dict(row)])

    def status(self) -> TableStatus:
        """Return a status summary of the table."""
        return TableStatus(
            path=self.path,
            is_file=self._is_file,
            is_utf8=self._is_utf8,
            is_error=self.is_error,
            error_message=self._error_message,
            row_count=self.row_count,
            columns=self.columns,
        )

    def require_usable(self) -> None:
        """Fail when the store carries a sticky construction error.

        Raises:
            FlatStorePersistError: If the construction load failed.
        """
        if self.is_error:
            raise FlatStorePersistError(self._error_message)

    def commit(self, candidate: TableSnapshot) -> None:
        """Persist a candidate table and make the reloaded file live.

        Args:
            candidate: Complete table to write.

        Raises:
            FlatStorePersistError: If the store is unusable or I/O fails.
            FlatStoreCodecError: If the candidate cannot be encoded or reloaded.
        """
        self.require_usable()
        try:
            write_table_file(self._path, candidate, self._is_utf8)
            reloaded = read_table_file(self._path, self._is_utf8, self._header_offset)
        except FlatStoreError as error:
            _LOGGER.error("table_save_failed", path=self.path, error=str(error))
            raise
        self._snapshot = reloaded
        _LOGGER.info("table_saved", path=self.path, row_count=self.row_count)

    def _load(self) -> None:
        """Run the single construction load and record any sticky error."""
        if not self._is_file:
            self._error_message = LOAD_FAILED_MESSAGE
            _LOGGER.error("table_load_failed", path=self.path, error="path is not a file")
            return
        if self._header_offset < 0:
            self._error_message = (
                f"{LOAD_FAILED_MESSAGE} Invalid header offset "
                f"{self._header_offset}: expected >= 0."
            )
            _LOGGER.error("table_load_failed", path=self.path, error=self._error_message)
            return
        try:
            self._snapshot = read_table_file(self._path, self._is_utf8, self._header_offset)
        except FlatStoreError as error:
            self._error_message = f"{LOAD_FAILED_MESSAGE} {error}"
            _LOGGER.error("table_load_failed", path=self.path, error=str(error))
            return
        _LOGGER.info(
            "table_loaded",
            path=self.path,
            column_count=len(self.columns),
            row_count=self.row_count,
        )
