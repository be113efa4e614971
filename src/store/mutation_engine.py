"""Row mutations with write-then-reload persistence.

Each mutation builds a new row list from the live table, hands it to
TableStore.commit, and leaves the live table untouched when validation
or persistence fails.
"""

from __future__ import annotations

from typing import Mapping

from core.constants import CELL_TRIM_CHARACTERS
from core.errors import FlatStoreNotFoundError, FlatStoreValidationError
from core.logging_config import get_logger
from core.types import Record, TableSnapshot
from store.query_engine import cell_value, find_row_index, is_valid_key_value
from store.table_store import TableStore
from store.text_codec import sanitize_header_cell

_LOGGER = get_logger(__name__)


def insert_row(store: TableStore, row: Mapping[str, object]) -> int:
    """Append a row and persist the table.

    The store does not check identifier uniqueness. Callers that rely on a
    unique key must take it from ``next_id`` before inserting. When the
    table has no header yet, the row's keys become the header. The row
    must hold a non-empty value in at least one header column.

    Args:
        store: Target table store.
        row: Column-to-value mapping; values are stored as strings, None as "".

    Returns:
        Number of inserted rows.

    Raises:
        FlatStoreValidationError: If the row is not a non-empty mapping
            with a value in a header column, or if adopted header names are
            not valid header cells.
        FlatStorePersistError: If the table cannot be persisted.
    """
    record = _to_record(row)
    store.require_usable()
    snapshot = store.snapshot
    columns = snapshot.columns or _adopt_header(record)
    _require_header_value(record, columns)
    candidate = TableSnapshot(
        columns=columns,
        rows=tuple(snapshot.copy_rows() + [record]),
        preamble=snapshot.preamble,
    )
    store.commit(candidate)
    _LOGGER.info("row_inserted", path=store.path, row_count=store.row_count)
    return 1


def update_row(
    store: TableStore,
    key_value: object,
    row: Mapping[str, object],
    column: str,
) -> int:
    """Replace the first row whose key column matches, then persist.

    Args:
        store: Target table store.
        key_value: Key value; must be non-empty numeric text.
        row: Complete replacement row.
        column: Key column name.

    Returns:
        Number of updated rows.

    Raises:
        FlatStoreValidationError: If the key is invalid or the row holds no
            value in a header column.
        FlatStoreNotFoundError: If no row matches the key.
        FlatStorePersistError: If the table cannot be persisted.
    """
    _require_key(key_value)
    record = _to_record(row)
    store.require_usable()
    rows = store.snapshot.copy_rows()
    index = find_row_index(rows, key_value, column)
    if index is None:
        raise FlatStoreNotFoundError(f"No row with {column}={key_value!s} to update.")
    _require_header_value(record, store.columns)
    rows[index] = record
    store.commit(store.snapshot.with_rows(rows))
    _LOGGER.info("row_updated", path=store.path, column=column, key_value=str(key_value))
    return 1


def delete_rows(
    store: TableStore,
    id_value: object,
    column: str,
    only_first: bool = True,
) -> int:
    """Remove rows whose key column matches, then persist.

    Rows are scanned from the end, so with ``only_first`` the match
    closest to the end of the file is removed. The table is persisted even
    when nothing matched.

    Args:
        store: Target table store.
        id_value: Identifier value; must be non-empty numeric text.
        column: Identifier column name.
        only_first: Stop after the first match found.

    Returns:
        Number of deleted rows.

    Raises:
        FlatStoreValidationError: If the identifier is invalid.
        FlatStorePersistError: If the table cannot be persisted.
    """
    _require_key(id_value)
    store.require_usable()
    expected = str(id_value).strip()
    rows = store.snapshot.copy_rows()
    deleted = 0
    for index in range(len(rows) - 1, -1, -1):
        if cell_value(rows[index], column) != expected:
            continue
        del rows[index]
        deleted += 1
        if only_first:
            break
    store.commit(store.snapshot.with_rows(rows))
    _LOGGER.info("rows_deleted", path=store.path, column=column, deleted=deleted)
    return deleted


def _require_key(value: object) -> None:
    """Reject empty or non-numeric key values."""
    if not is_valid_key_value(value):
        raise FlatStoreValidationError(
            f"Invalid key value {value!r}: expected non-empty numeric text."
        )


def _to_record(row: Mapping[str, object]) -> Record:
    """Convert a caller mapping into a string record.

    Raises:
        FlatStoreValidationError: If the row is not a non-empty mapping.
    """
    if not isinstance(row, Mapping) or not row:
        raise FlatStoreValidationError("Invalid row: expected a non-empty column mapping.")
    return {str(key): "" if value is None else str(value) for key, value in row.items()}


def _adopt_header(record: Record) -> tuple[str, ...]:
    """Use the keys of the first inserted row as the header of an empty table.

    Raises:
        FlatStoreValidationError: If a key is not a valid header cell.
    """
    invalid = [key for key in record if sanitize_header_cell(key) != key or not key]
    if invalid:
        raise FlatStoreValidationError(
            f"Invalid column names {invalid!r}: header cells may only hold letters, "
            "digits and underscores."
        )
    return tuple(record)


def _require_header_value(record: Record, columns: tuple[str, ...]) -> None:
    """Reject rows that would be written without any header column value."""
    if not any(record.get(column, "").strip(CELL_TRIM_CHARACTERS) for column in columns):
        raise FlatStoreValidationError(
            f"Invalid row: no non-empty value for any of the columns "
            f"{list(columns)!r}."
        )
