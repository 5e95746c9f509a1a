"""Document service: upload validation, sync status changes, DocumentInfo mapping.

Shared by the documents router and the documents.mark_sync_status task.
"""

import logging
from typing import Optional

from ..domain.documents import (
    UNSUPPORTED_TYPE_MESSAGE,
    MAX_FILE_SIZE,
    build_stored_filename,
    is_supported_mime_type,
    mime_type_for_filename,
    original_name_from_stored,
    validate_file_size,
    validate_upload_filename,
)
from ..domain.documents.ports.document_storage_port import DocumentStoragePort, StoredDocument
from ..domain.documents.sync_status import SyncStatus, can_transition, get_allowed_transitions
from ..observability.metrics import documents_rejected_total, document_sync_transitions_total
from .schemas import DocumentInfo


logger = logging.getLogger(__name__)


class DocumentValidationError(ValueError):
    """Upload rejected before reaching storage.

    Attributes:
        message: Client-facing error message
        reason: Metrics label (mime_type, size, filename)
        status_code: HTTP status to answer with
    """

    def __init__(self, message: str, reason: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.reason = reason
        self.status_code = status_code


class InvalidTransitionError(ValueError):
    """Requested sync status change is not allowed from the current folder."""

    def __init__(self, from_status: SyncStatus, to_status: SyncStatus):
        allowed = ", ".join(s.value for s in get_allowed_transitions(from_status)) or "none"
        super().__init__(
            f"Cannot change sync status from {from_status.value} to {to_status.value}. "
            f"Allowed: {allowed}"
        )
        self.from_status = from_status
        self.to_status = to_status


def validate_upload(filename: Optional[str], content_type: Optional[str], content: bytes) -> None:
    """Check one uploaded file against the document rules.

    Raises:
        DocumentValidationError: If the file must be rejected
    """
    is_valid, error = validate_upload_filename(filename)
    if not is_valid:
        documents_rejected_total.labels(reason="filename").inc()
        raise DocumentValidationError(error, reason="filename")

    if not is_supported_mime_type(content_type):
        documents_rejected_total.labels(reason="mime_type").inc()
        raise DocumentValidationError(UNSUPPORTED_TYPE_MESSAGE, reason="mime_type")

    is_valid, _ = validate_file_size(len(content), max_size=MAX_FILE_SIZE)
    if not is_valid:
        documents_rejected_total.labels(reason="size").inc()
        raise DocumentValidationError(
            f"File too large. Maximum size is {MAX_FILE_SIZE // (1024 * 1024)} MB",
            reason="size",
            status_code=413,
        )


def store_document(storage: DocumentStoragePort, company_id: str, filename: str, content: bytes) -> StoredDocument:
    """Save validated content under a unique stored name in the QUEUED folder."""
    stored_filename = build_stored_filename(filename)
    return storage.save(company_id, stored_filename, content)


def change_sync_status(
    storage: DocumentStoragePort,
    company_id: str,
    filename: str,
    target: SyncStatus,
) -> StoredDocument:
    """Move a document to the folder for ``target``.

    Raises:
        FileNotFoundError: Document does not exist
        InvalidTransitionError: Transition not allowed from the current status
    """
    document = storage.locate(company_id, filename)
    if not can_transition(document.sync_status, target):
        raise InvalidTransitionError(document.sync_status, target)

    moved = storage.move(company_id, filename, target)
    document_sync_transitions_total.labels(
        from_status=document.sync_status.value,
        to_status=target.value,
    ).inc()

    logger.info(
        f"Document sync status changed: {document.sync_status.value} -> {target.value}",
        extra={"company_id": company_id, "document_name": filename}
    )
    return moved


def to_document_info(document: StoredDocument) -> DocumentInfo:
    return DocumentInfo(
        filename=document.filename,
        original_name=original_name_from_stored(document.filename),
        size=document.size_bytes,
        mimetype=mime_type_for_filename(document.filename),
        uploaded_at=document.modified_at,
        url=f"/documents/{document.company_id}/{document.filename}",
        sync_status=document.sync_status,
    )
