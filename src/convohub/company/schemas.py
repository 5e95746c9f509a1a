"""Pydantic schemas for company endpoints"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from ..auth.schemas import SUBDOMAIN_PATTERN, UserResponse


class CompanyResponse(BaseModel):
    id: UUID
    company_name: str
    subdomain: str
    logo: Optional[str] = None
    banner: Optional[str] = None
    bio: Optional[str] = None
    company_category: Optional[str] = None
    country: Optional[str] = None
    language: Optional[str] = None
    timezone: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CompanyProfileResponse(BaseModel):
    """The caller's company together with the caller."""
    company: CompanyResponse
    user: UserResponse


class CompanyUpdate(BaseModel):
    """Partial company update. Status is managed by the platform, not tenants."""
    company_name: Optional[str] = Field(None, min_length=1, max_length=255)
    subdomain: Optional[str] = Field(None, min_length=3, max_length=50, pattern=SUBDOMAIN_PATTERN)
    logo: Optional[str] = Field(None, max_length=500)
    banner: Optional[str] = Field(None, max_length=500)
    bio: Optional[str] = Field(None, max_length=255)
    company_category: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)
    language: Optional[str] = Field(None, max_length=10)
    timezone: Optional[str] = Field(None, max_length=50)


class DeleteResponse(BaseModel):
    """Returned by DELETE endpoints that echo the removed id."""
    id: UUID
    deleted: bool = True
