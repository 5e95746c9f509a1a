"""Pydantic schemas for web URI resources"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import AnyHttpUrl, BaseModel, Field, field_validator

from ..models.weburi_resource import WebURIStatus


MAX_URI_LENGTH = 500


def _normalize_uri(value: AnyHttpUrl) -> str:
    uri = str(value)
    if len(uri) > MAX_URI_LENGTH:
        raise ValueError(f"URI must be at most {MAX_URI_LENGTH} characters")
    return uri


class WebURICreate(BaseModel):
    uri: AnyHttpUrl = Field(..., examples=["https://example.com/faq"])
    status: WebURIStatus = WebURIStatus.QUEUED

    @field_validator("uri")
    @classmethod
    def check_length(cls, v: AnyHttpUrl) -> AnyHttpUrl:
        _normalize_uri(v)
        return v


class WebURIUpdate(BaseModel):
    uri: Optional[AnyHttpUrl] = None
    status: Optional[WebURIStatus] = None

    @field_validator("uri")
    @classmethod
    def check_length(cls, v: Optional[AnyHttpUrl]) -> Optional[AnyHttpUrl]:
        if v is not None:
            _normalize_uri(v)
        return v


class WebURIResponse(BaseModel):
    id: UUID
    company_id: UUID
    uri: str
    status: WebURIStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
