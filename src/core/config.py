"""Runtime configuration model for flatstore.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_HEADER_OFFSET,
    DEFAULT_ID_COLUMN,
    FALSE_FLAG_VALUES,
    TRUE_FLAG_VALUES,
)
from core.errors import FlatStoreConfigError


@dataclass(frozen=True)
class StoreConfig:
    """Validated runtime configuration.

    Attributes:
        table_path: Optional default table file path.
        is_utf8: Whether table files are already UTF-8 encoded.
        id_column: Default identifier column name.
        header_offset: Zero-based line index of the header row.
    """

    table_path: Path | None
    is_utf8: bool
    id_column: str
    header_offset: int

    @classmethod
    def from_env(cls) -> "StoreConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            FlatStoreConfigError: If environment values are invalid.
        """
        table_path_value = os.getenv("FLATSTORE_PATH")
        is_utf8 = _parse_flag("FLATSTORE_UTF8", os.getenv("FLATSTORE_UTF8", "true"))
        id_column = os.getenv("FLATSTORE_ID_COLUMN", DEFAULT_ID_COLUMN).strip()
        if not id_column:
            raise FlatStoreConfigError(
                "Invalid FLATSTORE_ID_COLUMN value: expected a column name, got an empty string. "
                "Unset FLATSTORE_ID_COLUMN to use the default 'id'."
            )
        header_offset = _parse_header_offset(
            os.getenv("FLATSTORE_HEADER_OFFSET", str(DEFAULT_HEADER_OFFSET))
        )
        return cls(
            table_path=Path(table_path_value).expanduser() if table_path_value else None,
            is_utf8=is_utf8,
            id_column=id_column,
            header_offset=header_offset,
        )


def _parse_flag(name: str, raw_value: str) -> bool:
    """Parse a boolean environment flag.

    Args:
        name: Environment variable name for error context.
        raw_value: Raw string from environment.

    Returns:
        Parsed boolean.

    Raises:
        FlatStoreConfigError: If value is not a recognized flag.
    """
    normalized = raw_value.strip().lower()
    if normalized in TRUE_FLAG_VALUES:
        return True
    if normalized in FALSE_FLAG_VALUES:
        return False
    raise FlatStoreConfigError(
        f"Invalid {name} value: expected one of "
        f"{TRUE_FLAG_VALUES + FALSE_FLAG_VALUES}, got '{raw_value}'."
    )


def _parse_header_offset(raw_value: str) -> int:
    """Parse the header offset environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed non-negative integer offset.

    Raises:
        FlatStoreConfigError: If value is not a non-negative integer.
    """
    try:
        offset = int(raw_value)
    except ValueError as error:
        raise FlatStoreConfigError(
            "Invalid FLATSTORE_HEADER_OFFSET value: "
            f"expected integer, got '{raw_value}'. "
            "Set FLATSTORE_HEADER_OFFSET to a numeric value."
        ) from error
    if offset < 0:
        raise FlatStoreConfigError(
            f"Invalid FLATSTORE_HEADER_OFFSET value: expected >= 0, got {offset}."
        )
    return offset
