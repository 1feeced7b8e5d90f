"""Domain exceptions for the tape catalog."""

from __future__ import annotations


class CatalogError(RuntimeError):
    """Base error for catalog operations."""


class ValidationError(CatalogError):
    """Raised when a title or tape label is empty."""


class NotFoundError(CatalogError):
    """Raised when an update or delete targets an id missing from storage."""


class StorageError(CatalogError):
    """Raised when the underlying database fails."""
