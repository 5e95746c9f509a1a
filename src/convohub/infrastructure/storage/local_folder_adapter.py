"""Local filesystem implementation of DocumentStoragePort.

Layout: ``<root>/<company_id>/{notprocessed,processed,failed_to_process}/<filename>``
"""

import logging
import os
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import List

from ...domain.documents.ports.document_storage_port import DocumentStoragePort, StoredDocument
from ...domain.documents.sync_status import SyncStatus, FOLDER_FOR_STATUS, INITIAL_STATUS
from .errors import StorageError

logger = logging.getLogger(__name__)


class LocalFolderStorageAdapter(DocumentStoragePort):
    """Stores documents in per-company folders on local disk."""

    def __init__(self, root_path: str):
        self.root = Path(root_path).resolve()

    def _company_dir(self, company_id: str) -> Path:
        path = (self.root / company_id).resolve()
        if path.parent != self.root:
            raise StorageError(f"Invalid company folder: {company_id}")
        return path

    def _path(self, company_id: str, sync_status: SyncStatus, filename: str) -> Path:
        if os.sep in filename or "/" in filename or filename in ("", ".", ".."):
            raise StorageError(f"Invalid filename: {filename}")
        return self._company_dir(company_id) / FOLDER_FOR_STATUS[sync_status] / filename

    def _describe(self, company_id: str, sync_status: SyncStatus, path: Path) -> StoredDocument:
        stat = path.stat()
        return StoredDocument(
            company_id=company_id,
            filename=path.name,
            sync_status=sync_status,
            size_bytes=stat.st_size,
            modified_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
        )

    def ensure_company_folders(self, company_id: str) -> None:
        for folder in FOLDER_FOR_STATUS.values():
            (self._company_dir(company_id) / folder).mkdir(parents=True, exist_ok=True)

    def save(self, company_id: str, filename: str, content: bytes) -> StoredDocument:
        self.ensure_company_folders(company_id)
        path = self._path(company_id, INITIAL_STATUS, filename)
        try:
            path.write_bytes(content)
        except OSError as e:
            logger.error(f"Failed to write document {filename}: {e}", extra={"company_id": company_id})
            raise StorageError(f"Failed to store file: {e}")

        logger.info(
            f"Stored document {filename} ({len(content)} bytes)",
            extra={"company_id": company_id, "document_name": filename}
        )
        return self._describe(company_id, INITIAL_STATUS, path)

    def list_documents(self, company_id: str) -> List[StoredDocument]:
        documents = []
        for sync_status, folder in FOLDER_FOR_STATUS.items():
            folder_path = self._company_dir(company_id) / folder
            if not folder_path.is_dir():
                continue
            for entry in folder_path.iterdir():
                if entry.is_file():
                    documents.append(self._describe(company_id, sync_status, entry))

        documents.sort(key=lambda d: d.modified_at, reverse=True)
        return documents

    def locate(self, company_id: str, filename: str) -> StoredDocument:
        for sync_status in FOLDER_FOR_STATUS:
            path = self._path(company_id, sync_status, filename)
            if path.is_file():
                return self._describe(company_id, sync_status, path)
        raise FileNotFoundError(f"File not found: {filename}")

    def read(self, company_id: str, filename: str) -> bytes:
        document = self.locate(company_id, filename)
        path = self._path(company_id, document.sync_status, filename)
        try:
            return path.read_bytes()
        except OSError as e:
            raise StorageError(f"Failed to read file: {e}")

    def move(self, company_id: str, filename: str, target: SyncStatus) -> StoredDocument:
        document = self.locate(company_id, filename)
        if document.sync_status == target:
            return document

        self.ensure_company_folders(company_id)
        source = self._path(company_id, document.sync_status, filename)
        destination = self._path(company_id, target, filename)
        try:
            shutil.move(str(source), str(destination))
        except OSError as e:
            raise StorageError(f"Failed to move file: {e}")

        logger.info(
            f"Moved document {filename} from {document.sync_status.value} to {target.value}",
            extra={"company_id": company_id, "document_name": filename}
        )
        return self._describe(company_id, target, destination)

    def delete(self, company_id: str, filename: str) -> None:
        document = self.locate(company_id, filename)
        path = self._path(company_id, document.sync_status, filename)
        try:
            path.unlink()
        except OSError as e:
            raise StorageError(f"Failed to delete file: {e}")
        logger.info(f"Deleted document {filename}", extra={"company_id": company_id, "document_name": filename})

    def check_health(self) -> None:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Document root not writable: {e}")
        if not os.access(self.root, os.W_OK):
            raise StorageError(f"Document root not writable: {self.root}")
