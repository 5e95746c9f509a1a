"""Pydantic schemas for authentication endpoints"""

from pydantic import BaseModel, EmailStr, Field
from uuid import UUID
from datetime import datetime
from typing import Optional


SUBDOMAIN_PATTERN = r"^[a-z0-9-]+$"


class LoginRequest(BaseModel):
    """Request schema for staff login.

    Emails are unique across companies, so no tenant selector is needed.
    """
    email: EmailStr
    password: str = Field(..., min_length=1)


class SignupRequest(BaseModel):
    """Request schema for company signup.

    Creates the company together with its OWNER account.
    """
    company_name: str = Field(..., min_length=1, max_length=255, examples=["Acme Support"])
    subdomain: str = Field(..., min_length=3, max_length=50, pattern=SUBDOMAIN_PATTERN, examples=["acme"])
    user_name: str = Field(..., min_length=1, max_length=50, examples=["Jane Doe"])
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    company_category: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)
    language: Optional[str] = Field(None, max_length=10)
    timezone: Optional[str] = Field(None, max_length=50)


class LoginResponse(BaseModel):
    """Response schema for successful login or signup.

    Attributes:
        access_token: JWT access token
        token_type: Token type (always "bearer")
        expires_in: Token expiry in seconds
    """
    access_token: str
    token_type: str = "bearer"
    expires_in: int = 3600


class TokenPayload(BaseModel):
    """Decoded staff JWT payload."""
    sub: str
    company_id: str
    role: str
    email: str
    exp: int
    iat: int


class UserResponse(BaseModel):
    """User information response (excludes password_hash)."""
    id: UUID
    company_id: UUID
    user_name: str
    email: str
    profile_uri: Optional[str] = None
    bio: Optional[str] = None
    role: str
    status: str
    last_login_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MeResponse(BaseModel):
    """Response schema for GET /auth/me endpoint."""
    user: UserResponse
