"""Errors raised by storage adapters."""


class StorageError(Exception):
    """Base exception for storage operations."""
    pass
