"""Document Storage Port - Domain interface for company document folders.

Every company owns three folders (one per sync status) under a storage
root; a document lives in exactly one of them at a time. Adapters map this
layout onto a local filesystem or an S3 bucket.

Architecture: Hexagonal - Port interface in domain layer
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import List

from ..sync_status import SyncStatus


@dataclass
class StoredDocument:
    """Metadata for a stored document.

    Attributes:
        company_id: Company folder the file belongs to
        filename: Stored filename ({epoch_ms}-{random}-{sanitized})
        sync_status: Status implied by the folder holding the file
        size_bytes: File size in bytes
        modified_at: Last modification time reported by the backend
    """
    company_id: str
    filename: str
    sync_status: SyncStatus
    size_bytes: int
    modified_at: datetime


class DocumentStoragePort(ABC):
    """Port interface for company document storage.

    Key Design Principles:
    - Storage paths always start with the company id (tenant isolation)
    - Filenames are validated by callers; adapters still refuse separators
    - Moving a file between folders is how sync status changes

    Example Usage:
        storage = build_document_storage()
        doc = storage.save("c0ffee...", "1700000000000-7-faq.pdf", data)
        storage.move(doc.company_id, doc.filename, SyncStatus.SYNCED)
    """

    @abstractmethod
    def save(self, company_id: str, filename: str, content: bytes) -> StoredDocument:
        """Store a new document in the company's QUEUED folder.

        Raises:
            StorageError: If the write fails
        """

    @abstractmethod
    def list_documents(self, company_id: str) -> List[StoredDocument]:
        """List documents of all three folders, newest first."""

    @abstractmethod
    def locate(self, company_id: str, filename: str) -> StoredDocument:
        """Find which folder holds a document.

        Raises:
            FileNotFoundError: If no folder contains the file
        """

    @abstractmethod
    def read(self, company_id: str, filename: str) -> bytes:
        """Return the document content.

        Raises:
            FileNotFoundError: If the document doesn't exist
            StorageError: If retrieval fails
        """

    @abstractmethod
    def move(self, company_id: str, filename: str, target: SyncStatus) -> StoredDocument:
        """Move a document into the folder for ``target``.

        Raises:
            FileNotFoundError: If the document doesn't exist
            StorageError: If the move fails
        """

    @abstractmethod
    def delete(self, company_id: str, filename: str) -> None:
        """Delete a document from whichever folder holds it.

        Raises:
            FileNotFoundError: If the document doesn't exist
        """

    @abstractmethod
    def check_health(self) -> None:
        """Raise StorageError if the backend is not usable."""
