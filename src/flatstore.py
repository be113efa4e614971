"""Public SDK surface for flatstore.

This module provides a stable import path for library users.
It re-exports the table client and typed result models.
"""

from __future__ import annotations

from core.config import StoreConfig
from core.constants import VERSION
from core.errors import (
    FlatStoreCodecError,
    FlatStoreConfigError,
    FlatStoreError,
    FlatStoreNotFoundError,
    FlatStorePersistError,
    FlatStoreValidationError,
)
from core.types import OperationResult, Record, TableSnapshot, TableStatus
from store.table_sdk import FlatTable
from store.text_codec import decode_table, encode_table

__all__ = [
    "FlatStoreCodecError",
    "FlatStoreConfigError",
    "FlatStoreError",
    "FlatStoreNotFoundError",
    "FlatStorePersistError",
    "FlatStoreValidationError",
    "FlatTable",
    "OperationResult",
    "Record",
    "StoreConfig",
    "TableSnapshot",
    "TableStatus",
    "VERSION",
    "decode_table",
    "encode_table",
]
