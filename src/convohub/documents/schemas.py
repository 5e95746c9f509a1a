"""Document API request/response schemas"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from ..domain.documents.sync_status import SyncStatus


class DocumentInfo(BaseModel):
    """Metadata for one stored company document"""
    filename: str = Field(..., description="Stored filename ({epoch_ms}-{random}-{name})")
    original_name: str = Field(..., description="Sanitized name the file was uploaded with")
    size: int = Field(..., description="File size in bytes")
    mimetype: str = Field(..., description="Content type derived from the extension")
    uploaded_at: datetime
    url: str = Field(..., description="Relative URL of the document")
    sync_status: SyncStatus


class DocumentListResponse(BaseModel):
    total: int
    documents: List[DocumentInfo]


class DocumentBatchResponse(BaseModel):
    """Response for upload-multiple"""
    message: str
    total: int
    documents: List[DocumentInfo]


class SyncStatusUpdate(BaseModel):
    sync_status: SyncStatus = Field(..., description="Target status: QUEUED, SYNCED or FAILED")


class DocumentDeleteResponse(BaseModel):
    message: str = "Document deleted successfully"
    filename: str


class AvatarUploadResponse(BaseModel):
    filename: str
    url: str
