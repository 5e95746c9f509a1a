"""Pydantic schemas for customer endpoints"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from ..models.customer import CustomerSource


class CustomerRegisterRequest(BaseModel):
    """Public customer signup for one company and channel.

    contact is an email address or phone number.
    """
    company_id: UUID
    name: str = Field(..., min_length=2, max_length=255, examples=["John Doe"])
    contact: str = Field(..., min_length=1, max_length=255, examples=["john.doe@example.com"])
    password: str = Field(..., min_length=8, max_length=128)
    source: CustomerSource = CustomerSource.WEB
    profile_uri: Optional[str] = Field(None, max_length=500)


class CustomerLoginRequest(BaseModel):
    company_id: UUID
    contact: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)
    source: CustomerSource = CustomerSource.WEB


class CustomerUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    profile_uri: Optional[str] = Field(None, max_length=500)
    password: Optional[str] = Field(None, min_length=8, max_length=128)


class CustomerResponse(BaseModel):
    """Customer data (excludes password_hash)."""
    id: UUID
    company_id: UUID
    name: str
    profile_uri: Optional[str] = None
    contact: str
    source: str
    conversation_count: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CustomerAuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    customer: CustomerResponse


class CustomerDeleteResponse(BaseModel):
    message: str = "Customer deleted successfully"
    id: UUID
