"""Document storage adapters."""

from .errors import StorageError
from .storage_config import (
    StorageConfig,
    build_document_storage,
    load_storage_config,
    validate_storage_config,
)

__all__ = [
    "StorageError",
    "StorageConfig",
    "build_document_storage",
    "load_storage_config",
    "validate_storage_config",
]
