"""Document tasks: moving files between sync folders."""

import logging
from typing import Dict, Any

from celery import shared_task

from ..documents.service import change_sync_status
from ..domain.documents.sync_status import SyncStatus
from ..infrastructure.storage import build_document_storage
from .base import BaseTask


logger = logging.getLogger(__name__)


@shared_task(base=BaseTask, name="documents.mark_sync_status")
def mark_sync_status(filename: str, target_status: str, company_id: str) -> Dict[str, Any]:
    """Move a company document to the folder for target_status.

    Used by external processors to report QUEUED/SYNCED/FAILED outcomes.

    Raises:
        ValueError: Unknown status or disallowed transition
        FileNotFoundError: Document does not exist
    """
    target = SyncStatus(target_status)
    storage = build_document_storage()

    document = change_sync_status(storage, company_id, filename, target)
    logger.info(
        f"Document {filename} marked {target.value}",
        extra={"company_id": company_id, "document_name": filename}
    )

    return {
        "filename": document.filename,
        "sync_status": document.sync_status.value,
        "company_id": company_id,
    }
