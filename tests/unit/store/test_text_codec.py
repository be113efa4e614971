"""Unit tests for table text encoding and decoding."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import FlatStoreCodecError, FlatStorePersistError
from core.types import TableSnapshot
from store.text_codec import (
    clean_data_cell,
    decode_table,
    encode_table,
    read_table_file,
    sanitize_header_cell,
    split_lines,
    write_table_file,
)


def test_sanitize_header_cell_strips_disallowed_characters() -> None:
    """Header cells should keep only letters, umlauts, digits and underscore."""
    assert sanitize_header_cell(" Straße/Haus-Nr. (neu)_2\r") == "StraßeHausNrneu_2"


def test_clean_data_cell_removes_quotes_and_whitespace() -> None:
    """Data cells should lose every quote character and outer whitespace."""
    assert clean_data_cell('  "Say ""hi"""  ') == "Say hi"


def test_split_lines_accepts_mixed_terminators() -> None:
    """Reader should split on CRLF, CR and LF without a trailing empty line."""
    assert split_lines("a\r\nb\rc\nd\r\n") == ["a", "b", "c", "d"]


def test_decode_table_maps_cells_to_header() -> None:
    """Decoder should build one record per data line keyed by header."""
    snapshot = decode_table('id;name\n1;"Ann"\n2; Bob \n')

    assert snapshot.columns == ("id", "name")
    assert snapshot.rows == ({"id": "1", "name": "Ann"}, {"id": "2", "name": "Bob"})


def test_decode_table_does_not_sanitize_data_cells() -> None:
    """Only header cells are sanitized; data keeps punctuation."""
    snapshot = decode_table("Mail Adresse;note\na@b.c;x-y (z)\n")

    assert snapshot.columns == ("MailAdresse", "note")
    assert snapshot.rows[0]["note"] == "x-y (z)"


def test_decode_table_returns_empty_table_for_empty_text() -> None:
    """An empty file should decode to an empty table without error."""
    snapshot = decode_table("")

    assert snapshot == TableSnapshot()


def test_decode_table_keeps_short_rows_under_populated() -> None:
    """Rows with fewer cells than the header should keep only present cells."""
    snapshot = decode_table("id;name;city\n1;Ann\n")

    assert snapshot.rows[0] == {"id": "1", "name": "Ann"}


def test_decode_table_drops_surplus_cells() -> None:
    """Cells beyond the header width should be ignored."""
    snapshot = decode_table("id;name\n1;Ann;extra;more\n")

    assert snapshot.rows[0] == {"id": "1", "name": "Ann"}


def test_decode_table_skips_blank_lines() -> None:
    """Whitespace-only lines should not produce records."""
    snapshot = decode_table("id;name\n\n1;Ann\n   \n2;Bob")

    assert [row["id"] for row in snapshot.rows] == ["1", "2"]


def test_decode_table_honours_header_offset() -> None:
    """Lines before the header offset should be kept as preamble."""
    snapshot = decode_table("note\nid;name\n1;Ann\n", header_offset=1)

    assert snapshot.preamble == ("note",)
    assert snapshot.columns == ("id", "name")
    assert len(snapshot.rows) == 1


def test_decode_table_with_offset_beyond_content_is_empty() -> None:
    """A header offset past the last line should yield an empty table."""
    snapshot = decode_table("only line\n", header_offset=3)

    assert snapshot.columns == () and snapshot.rows == ()


def test_encode_table_uses_crlf_and_header_order() -> None:
    """Encoder should join header and rows with CRLF in header order."""
    snapshot = TableSnapshot(
        columns=("id", "name"),
        rows=({"name": "Ann", "id": "1"}, {"id": "2", "name": "Bob"}),
    )

    assert encode_table(snapshot) == "id;name\r\n1;Ann\r\n2;Bob"


def test_encode_table_keeps_under_populated_rows_short() -> None:
    """Trailing absent cells are omitted, interior ones written empty."""
    snapshot = TableSnapshot(
        columns=("id", "name", "city"),
        rows=({"id": "1", "name": "Ann"}, {"id": "2", "city": "Kiel"}),
    )

    assert encode_table(snapshot) == "id;name;city\r\n1;Ann\r\n2;;Kiel"


def test_encode_table_rejects_separator_inside_value() -> None:
    """Values containing the separator cannot be represented."""
    snapshot = TableSnapshot(columns=("id", "name"), rows=({"id": "1", "name": "A;B"},))

    with pytest.raises(FlatStoreCodecError):
        encode_table(snapshot)


def test_encode_table_rejects_line_break_inside_value() -> None:
    """Values containing a line break cannot be represented."""
    snapshot = TableSnapshot(columns=("id", "name"), rows=({"id": "1", "name": "A\nB"},))

    with pytest.raises(FlatStoreCodecError):
        encode_table(snapshot)


def test_read_table_file_converts_legacy_encoding(tmp_path: Path) -> None:
    """Legacy files should be decoded from ISO-8859-1."""
    table_path = tmp_path / "legacy.csv"
    table_path.write_bytes("id;Straße\r\n1;Köln\r\n".encode("iso-8859-1"))

    snapshot = read_table_file(table_path, is_utf8=False)

    assert snapshot.columns == ("id", "Straße")
    assert snapshot.rows[0]["Straße"] == "Köln"


def test_read_table_file_rejects_invalid_utf8(tmp_path: Path) -> None:
    """A legacy file opened as UTF-8 should fail with a codec error."""
    table_path = tmp_path / "legacy.csv"
    table_path.write_bytes("id;city\r\n1;Köln\r\n".encode("iso-8859-1"))

    with pytest.raises(FlatStoreCodecError):
        read_table_file(table_path, is_utf8=True)


def test_read_table_file_raises_for_missing_file(tmp_path: Path) -> None:
    """Reading a missing file should raise a persistence error."""
    with pytest.raises(FlatStorePersistError):
        read_table_file(tmp_path / "missing.csv", is_utf8=True)


def test_write_table_file_round_trips_legacy_bytes(tmp_path: Path) -> None:
    """Writing a legacy table should reproduce the ISO-8859-1 bytes."""
    table_path = tmp_path / "legacy.csv"
    original = "id;city\r\n1;Köln\r\n2;Gießen".encode("iso-8859-1")
    table_path.write_bytes(original)

    write_table_file(table_path, read_table_file(table_path, is_utf8=False), is_utf8=False)

    assert table_path.read_bytes() == original


def test_write_table_file_rejects_unencodable_legacy_value(tmp_path: Path) -> None:
    """Characters outside ISO-8859-1 cannot be written to a legacy table."""
    table_path = tmp_path / "legacy.csv"
    snapshot = TableSnapshot(columns=("id", "name"), rows=({"id": "1", "name": "Zoë €"},))

    with pytest.raises(FlatStoreCodecError):
        write_table_file(table_path, snapshot, is_utf8=False)

    assert not table_path.exists()


def test_encode_table_rejects_row_without_header_values() -> None:
    """A row that would encode to a blank line cannot be written."""
    snapshot = TableSnapshot(columns=("id", "name"), rows=({"ID": "2", "Name": "Bob"},))

    with pytest.raises(FlatStoreCodecError):
        encode_table(snapshot)


def test_clean_data_cell_keeps_non_breaking_space() -> None:
    """Only ASCII whitespace, NUL and vertical tab are trimmed from cells."""
    assert clean_data_cell("\t\xa0Köln\xa0 \x0b") == "\xa0Köln\xa0"


def test_decode_table_rejects_negative_header_offset() -> None:
    """A negative header offset is not a valid line index."""
    with pytest.raises(ValueError):
        decode_table("id;name\n1;Ann\n", header_offset=-1)
