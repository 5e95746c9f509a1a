"""Pydantic schemas for department endpoints"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class DepartmentCreate(BaseModel):
    department_name: str = Field(..., min_length=1, max_length=150, examples=["Support"])
    description: Optional[str] = None
    department_profile_uri: Optional[str] = Field(None, max_length=500)


class DepartmentUpdate(BaseModel):
    department_name: Optional[str] = Field(None, min_length=1, max_length=150)
    description: Optional[str] = None
    department_profile_uri: Optional[str] = Field(None, max_length=500)


class DepartmentMember(BaseModel):
    id: UUID
    user_name: str
    email: str
    profile_uri: Optional[str] = None

    class Config:
        from_attributes = True


class DepartmentResponse(BaseModel):
    id: UUID
    company_id: UUID
    department_name: str
    description: Optional[str] = None
    department_profile_uri: Optional[str] = None
    employee_count: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class DepartmentWithUsers(DepartmentResponse):
    """Department listing entry with a preview of its members."""
    users: List[DepartmentMember] = []
