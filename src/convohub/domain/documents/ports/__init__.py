"""Ports (interfaces) implemented by infrastructure adapters for documents."""

from .document_storage_port import DocumentStoragePort, StoredDocument

__all__ = ["DocumentStoragePort", "StoredDocument"]
