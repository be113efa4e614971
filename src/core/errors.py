"""flatstore exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Internal layers raise these; the table SDK turns them into results.
"""

from __future__ import annotations


class FlatStoreError(Exception):
    """Base exception for all flatstore failures."""


class FlatStoreConfigError(FlatStoreError):
    """Raised for invalid runtime configuration."""


class FlatStoreCodecError(FlatStoreError):
    """Raised when table text cannot be decoded or encoded."""


class FlatStorePersistError(FlatStoreError):
    """Raised when the backing file cannot be read or written."""


class FlatStoreValidationError(FlatStoreError):
    """Raised for rejected operation input such as non-numeric keys."""


class FlatStoreNotFoundError(FlatStoreError):
    """Raised when an operation targets a row that does not exist."""
