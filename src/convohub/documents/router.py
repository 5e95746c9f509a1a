"""Document API endpoints for ConvoHub

Company documents live in three folders per company (notprocessed,
processed, failed_to_process); the folder a file sits in is its sync
status. Every path is derived from the caller's company_id, never from
the request.
"""

import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status

from ..auth.dependencies import CurrentUser, get_current_admin, get_current_employee
from ..domain.documents import MAX_BATCH_FILES, is_safe_stored_filename
from ..domain.documents.ports.document_storage_port import DocumentStoragePort
from ..infrastructure.storage import StorageError, build_document_storage, load_storage_config
from ..models.user import User
from ..observability.metrics import documents_uploaded_total
from .schemas import (
    DocumentBatchResponse,
    DocumentDeleteResponse,
    DocumentInfo,
    DocumentListResponse,
    SyncStatusUpdate,
)
from .service import (
    DocumentValidationError,
    InvalidTransitionError,
    change_sync_status,
    store_document,
    to_document_info,
    validate_upload,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["Documents"])


def get_document_storage() -> DocumentStoragePort:
    """Dependency for the configured document storage adapter."""
    return build_document_storage()


def _check_filename(filename: str) -> None:
    if not is_safe_stored_filename(filename):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied to this file",
        )


def _document_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")


def _storage_failure(e: StorageError) -> HTTPException:
    logger.error(f"Document storage failure: {e}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Document storage unavailable. Please try again.",
    )


def _read_upload(file: UploadFile) -> bytes:
    content = file.file.read()
    file.file.close()
    return content


def _reject(e: DocumentValidationError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/upload", response_model=DocumentInfo, status_code=status.HTTP_201_CREATED)
def upload_document(
    current_user: Annotated[User, Depends(get_current_employee)],
    storage: Annotated[DocumentStoragePort, Depends(get_document_storage)],
    file: Optional[UploadFile] = File(None),
):
    """Upload a single document into the company's QUEUED folder.

    Accepted types: PDF, DOC, DOCX, CSV, TXT, XLS, XLSX (max 100 MB).

    Example:
        curl -X POST https://api.convohub.io/api/v1/documents/upload \\
             -H "Authorization: Bearer $TOKEN" \\
             -F "file=@faq.pdf"
    """
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    content = _read_upload(file)
    try:
        validate_upload(file.filename, file.content_type, content)
    except DocumentValidationError as e:
        raise _reject(e)

    company_id = str(current_user.company_id)
    try:
        document = store_document(storage, company_id, file.filename, content)
    except StorageError as e:
        raise _storage_failure(e)

    documents_uploaded_total.labels(backend=load_storage_config().backend).inc()
    logger.info(
        f"Document uploaded: {document.filename} ({document.size_bytes} bytes)",
        extra={"company_id": company_id, "user_id": str(current_user.id)}
    )

    return to_document_info(document)


@router.post("/upload-multiple", response_model=DocumentBatchResponse, status_code=status.HTTP_201_CREATED)
def upload_multiple_documents(
    current_user: Annotated[User, Depends(get_current_employee)],
    storage: Annotated[DocumentStoragePort, Depends(get_document_storage)],
    files: Optional[List[UploadFile]] = File(None),
):
    """Upload up to 10 documents at once.

    Every file is validated before any is stored, so one invalid file
    rejects the whole batch.

    Raises:
        HTTPException 400: No files, too many files, or an invalid file
    """
    if not files:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No files uploaded")

    if len(files) > MAX_BATCH_FILES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Too many files. Maximum {MAX_BATCH_FILES} files per batch."
        )

    payloads = []
    for file in files:
        content = _read_upload(file)
        try:
            validate_upload(file.filename, file.content_type, content)
        except DocumentValidationError as e:
            raise _reject(e)
        payloads.append((file.filename, content))

    company_id = str(current_user.company_id)
    backend = load_storage_config().backend
    documents = []
    try:
        for filename, content in payloads:
            documents.append(to_document_info(store_document(storage, company_id, filename, content)))
            documents_uploaded_total.labels(backend=backend).inc()
    except StorageError as e:
        raise _storage_failure(e)

    logger.info(
        f"Upload batch complete: {len(documents)} document(s)",
        extra={"company_id": company_id, "user_id": str(current_user.id)}
    )

    return DocumentBatchResponse(
        message=f"{len(documents)} document(s) uploaded successfully",
        total=len(documents),
        documents=documents,
    )


@router.get("/list", response_model=DocumentListResponse)
def list_documents(
    current_user: CurrentUser,
    storage: Annotated[DocumentStoragePort, Depends(get_document_storage)],
):
    """List the company's documents across all sync folders, newest first."""
    try:
        documents = storage.list_documents(str(current_user.company_id))
    except StorageError as e:
        raise _storage_failure(e)

    return DocumentListResponse(
        total=len(documents),
        documents=[to_document_info(d) for d in documents],
    )


def _file_response(storage: DocumentStoragePort, company_id: str, filename: str, disposition: str) -> Response:
    _check_filename(filename)
    try:
        document = storage.locate(company_id, filename)
        content = storage.read(company_id, filename)
    except FileNotFoundError:
        raise _document_not_found()
    except StorageError as e:
        raise _storage_failure(e)

    info = to_document_info(document)
    return Response(
        content=content,
        media_type=info.mimetype,
        headers={
            "Content-Disposition": f'{disposition}; filename="{info.original_name}"',
            "X-Company-Id": company_id,
        },
    )


@router.get("/{filename}")
def get_document(
    filename: str,
    current_user: CurrentUser,
    storage: Annotated[DocumentStoragePort, Depends(get_document_storage)],
):
    """Serve a company document inline."""
    return _file_response(storage, str(current_user.company_id), filename, "inline")


@router.get("/{filename}/download")
def download_document(
    filename: str,
    current_user: CurrentUser,
    storage: Annotated[DocumentStoragePort, Depends(get_document_storage)],
):
    """Serve a company document as an attachment."""
    return _file_response(storage, str(current_user.company_id), filename, "attachment")


@router.patch("/{filename}/status", response_model=DocumentInfo)
def update_sync_status(
    filename: str,
    data: SyncStatusUpdate,
    current_user: Annotated[User, Depends(get_current_admin)],
    storage: Annotated[DocumentStoragePort, Depends(get_document_storage)],
):
    """Move a document to another sync folder (ADMIN only).

    Allowed: QUEUED -> SYNCED | FAILED, SYNCED -> QUEUED, FAILED -> QUEUED.

    Raises:
        HTTPException 404: Document not found
        HTTPException 409: Transition not allowed
    """
    _check_filename(filename)
    try:
        document = change_sync_status(storage, str(current_user.company_id), filename, data.sync_status)
    except FileNotFoundError:
        raise _document_not_found()
    except InvalidTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except StorageError as e:
        raise _storage_failure(e)

    return to_document_info(document)


@router.delete("/{filename}", response_model=DocumentDeleteResponse)
def delete_document(
    filename: str,
    current_user: Annotated[User, Depends(get_current_employee)],
    storage: Annotated[DocumentStoragePort, Depends(get_document_storage)],
):
    """Delete a company document from whichever folder holds it."""
    _check_filename(filename)
    company_id = str(current_user.company_id)
    try:
        storage.delete(company_id, filename)
    except FileNotFoundError:
        raise _document_not_found()
    except StorageError as e:
        raise _storage_failure(e)

    logger.info(
        f"Document deleted: {filename}",
        extra={"company_id": company_id, "user_id": str(current_user.id)}
    )
    return DocumentDeleteResponse(filename=filename)
