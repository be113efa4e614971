"""Semicolon-separated table text encoding and decoding.

This module converts between table file bytes and TableSnapshot values.
The format has no quoting or escaping: quote characters are stripped from
data cells on read, and values containing the separator or a line break
cannot be written. Header cells are sanitized to a fixed character set.
"""

from __future__ import annotations

import re
from pathlib import Path

from core.constants import (
    CELL_TRIM_CHARACTERS,
    FIELD_SEPARATOR,
    HEADER_ALLOWED_CHARACTERS,
    LEGACY_ENCODING,
    QUOTE_CHARACTER,
    SAVE_LINE_TERMINATOR,
    UTF8_ENCODING,
)
from core.errors import FlatStoreCodecError, FlatStorePersistError
from core.logging_config import get_logger
from core.types import Record, TableSnapshot

_LOGGER = get_logger(__name__)
_LINE_BREAK_PATTERN = re.compile(r"\r\n|\r|\n")
_HEADER_DISALLOWED_PATTERN = re.compile(f"[^{HEADER_ALLOWED_CHARACTERS}]")


def sanitize_header_cell(cell: str) -> str:
    """Strip every character outside the header whitelist, then trim."""
    return _HEADER_DISALLOWED_PATTERN.sub("", cell).strip(CELL_TRIM_CHARACTERS)


def clean_data_cell(cell: str) -> str:
    """Remove quote characters from a data cell, then trim.

    Only space, tab, line breaks, NUL and vertical tab are trimmed, so a
    non-breaking space at either end of a cell is kept.
    """
    return cell.replace(QUOTE_CHARACTER, "").strip(CELL_TRIM_CHARACTERS)


def split_lines(text: str) -> list[str]:
    """Split text on any standard line terminator.

    Args:
        text: Decoded file content.

    Returns:
        Lines without terminators; a trailing terminator adds no line.
    """
    lines = _LINE_BREAK_PATTERN.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def decode_table(text: str, header_offset: int = 0) -> TableSnapshot:
    """Parse decoded file text into a table snapshot.

    Args:
        text: Decoded file content.
        header_offset: Zero-based index of the header line.

    Returns:
        Parsed snapshot; empty when no header line exists.

    Raises:
        ValueError: If the header offset is negative.
    """
    if header_offset < 0:
        raise ValueError(f"Invalid header offset {header_offset}: expected >= 0.")
    lines = split_lines(text)
    preamble = tuple(lines[:header_offset])
    if len(lines) <= header_offset:
        return TableSnapshot(preamble=preamble)
    columns = tuple(
        sanitize_header_cell(cell) for cell in lines[header_offset].split(FIELD_SEPARATOR)
    )
    if not any(columns):
        columns = ()
    if len(set(columns)) != len(columns):
        _LOGGER.warning("duplicate_header_columns", columns=list(columns))
    rows: list[Record] = []
    for line_number, line in enumerate(lines[header_offset + 1 :], header_offset + 2):
        if not line.strip(CELL_TRIM_CHARACTERS):
            continue
        rows.append(_decode_row(line, columns, line_number))
    return TableSnapshot(columns=columns, rows=tuple(rows), preamble=preamble)


def encode_table(snapshot: TableSnapshot) -> str:
    """Render a table snapshot as file text.

    Args:
        snapshot: Table to serialize.

    Returns:
        Preamble, header and rows joined by CRLF, without a trailing break.

    Raises:
        FlatStoreCodecError: If a value cannot be represented in the format.
    """
    lines = list(snapshot.preamble)
    lines.append(FIELD_SEPARATOR.join(snapshot.columns))
    for row in snapshot.rows:
        lines.append(_encode_row(row, snapshot.columns))
    return SAVE_LINE_TERMINATOR.join(lines)


def read_table_file(path: Path, is_utf8: bool, header_offset: int = 0) -> TableSnapshot:
    """Read and decode a table file.

    Args:
        path: Table file path.
        is_utf8: Whether the file is UTF-8; otherwise ISO-8859-1 is assumed.
        header_offset: Zero-based index of the header line.

    Returns:
        Parsed snapshot.

    Raises:
        FlatStorePersistError: If the file cannot be read.
        FlatStoreCodecError: If the bytes are not valid in the declared encoding.
    """
    try:
        payload = path.read_bytes()
    except OSError as error:
        raise FlatStorePersistError(
            f"Failed to read table file at {path}: {error.strerror or error}."
        ) from error
    encoding = _file_encoding(is_utf8)
    try:
        text = payload.decode(encoding)
    except UnicodeDecodeError as error:
        raise FlatStoreCodecError(
            f"Failed to decode table file at {path} as {encoding}: {error.reason}. "
            "Open the table with the legacy encoding flag if it is not UTF-8."
        ) from error
    return decode_table(text, header_offset)


def write_table_file(path: Path, snapshot: TableSnapshot, is_utf8: bool) -> None:
    """Encode a snapshot and replace the whole table file content.

    Args:
        path: Table file path.
        snapshot: Table to persist.
        is_utf8: Whether to write UTF-8; otherwise ISO-8859-1.

    Raises:
        FlatStoreCodecError: If the table cannot be encoded.
        FlatStorePersistError: If the file cannot be written.
    """
    encoding = _file_encoding(is_utf8)
    text = encode_table(snapshot)
    try:
        payload = text.encode(encoding)
    except UnicodeEncodeError as error:
        raise FlatStoreCodecError(
            f"Failed to encode table for {path} as {encoding}: "
            f"{text[error.start : error.end]!r} is not representable."
        ) from error
    try:
        path.write_bytes(payload)
    except OSError as error:
        raise FlatStorePersistError(
            f"Failed to write table file at {path}: {error.strerror or error}."
        ) from error


def _decode_row(line: str, columns: tuple[str, ...], line_number: int) -> Record:
    """Map the cells of one data line onto header columns.

    Args:
        line: Raw data line.
        columns: Header names.
        line_number: One-based line number for log context.

    Returns:
        Record holding only the cells present in the line.
    """
    cells = line.split(FIELD_SEPARATOR)
    if len(cells) > len(columns):
        _LOGGER.warning(
            "row_surplus_cells",
            line_number=line_number,
            cell_count=len(cells),
            column_count=len(columns),
        )
    return {column: clean_data_cell(cell) for column, cell in zip(columns, cells)}


def _encode_row(row: Record, columns: tuple[str, ...]) -> str:
    """Join row values in header order.

    Trailing absent columns are omitted so under-populated rows keep their
    width; interior absent columns are written empty.
    """
    present = [index for index, column in enumerate(columns) if column in row]
    width = present[-1] + 1 if present else 0
    values = [str(row.get(column, "")) for column in columns[:width]]
    for value in values:
        if FIELD_SEPARATOR in value or _LINE_BREAK_PATTERN.search(value):
            raise FlatStoreCodecError(
                f"Cannot encode value {value!r}: separators and line breaks "
                "are not supported inside fields."
            )
    line = FIELD_SEPARATOR.join(values)
    if not line.strip(CELL_TRIM_CHARACTERS):
        raise FlatStoreCodecError(
            f"Cannot encode row {row!r}: it has no value in any header column "
            f"({FIELD_SEPARATOR.join(columns)}) and would be read back as a blank line."
        )
    return line


def _file_encoding(is_utf8: bool) -> str:
    """Return the codec name for the encoding flag."""
    return UTF8_ENCODING if is_utf8 else LEGACY_ENCODING
