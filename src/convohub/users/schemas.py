"""Pydantic schemas for user management endpoints"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from ..auth.roles import UserRole
from ..auth.schemas import UserResponse
from ..models.user import UserStatus


class DepartmentRef(BaseModel):
    id: UUID
    department_name: str

    class Config:
        from_attributes = True


class ShiftRef(BaseModel):
    id: UUID
    shift_name: str

    class Config:
        from_attributes = True


class InviteRequest(BaseModel):
    """Invite a staff member by email.

    Department and shift ids must belong to the inviting company.
    """
    email: EmailStr
    role: UserRole = UserRole.EMPLOYEE
    department_ids: List[UUID] = Field(default_factory=list)
    shift_ids: List[UUID] = Field(default_factory=list)


class PendingUserResponse(BaseModel):
    id: UUID
    company_id: UUID
    email: str
    role: str
    created_at: datetime
    departments: List[DepartmentRef] = []
    shifts: List[ShiftRef] = []

    class Config:
        from_attributes = True


class RegistrationRequest(BaseModel):
    """Completes an invitation. Email, role and company come from the invitation."""
    user_name: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=8, max_length=128)
    profile_uri: Optional[str] = Field(None, max_length=500)
    bio: Optional[str] = Field(None, max_length=255)


class UserDetailResponse(UserResponse):
    """User with department and shift memberships."""
    departments: List[DepartmentRef] = []
    shifts: List[ShiftRef] = []


class UserListItem(BaseModel):
    id: UUID
    user_name: str
    email: str
    avatar: Optional[str] = None
    role: str
    status: str
    departments: List[DepartmentRef] = []


class SocketDepartment(BaseModel):
    """Department rooms a user joins on the realtime gateway."""
    department_id: UUID
    department_name: str


class ProfileUpdate(BaseModel):
    """Profile update. role and status are honoured for ADMIN and above only."""
    user_name: Optional[str] = Field(None, min_length=1, max_length=50)
    bio: Optional[str] = Field(None, max_length=255)
    profile_uri: Optional[str] = Field(None, max_length=500)
    role: Optional[UserRole] = None
    status: Optional[UserStatus] = None


class PasswordChangeRequest(BaseModel):
    old_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=128)


class MessageResponse(BaseModel):
    message: str
