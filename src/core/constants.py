"""Core constants used across flatstore modules.

This module centralizes format and default values.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

VERSION = "0.1.1"
FIELD_SEPARATOR = ";"
SAVE_LINE_TERMINATOR = "\r\n"
QUOTE_CHARACTER = '"'
CELL_TRIM_CHARACTERS = " \t\n\r\0\x0b"
UTF8_ENCODING = "utf-8"
LEGACY_ENCODING = "iso-8859-1"
DEFAULT_ID_COLUMN = "id"
DEFAULT_HEADER_OFFSET = 0
HEADER_ALLOWED_CHARACTERS = "0-9A-Za-zÄÖÜäöüß_"
LOAD_FAILED_MESSAGE = "Can't load CSV file!"
TRUE_FLAG_VALUES = ("1", "true", "yes", "on")
FALSE_FLAG_VALUES = ("0", "false", "no", "off")
