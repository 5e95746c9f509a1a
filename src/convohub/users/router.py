"""Staff user endpoints.

- Invitations (ADMIN): create a pending user and email a registration link
- Registration: redeem an invitation token and become a full user
- Listing and profile management for the caller's company

Emails are unique across the system; every query is scoped to the
caller's company. Mutations write audit log entries.
"""

import logging
from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from ..audit.service import log_from_request
from ..auth.dependencies import CurrentUser, get_pending_user, require_role
from ..auth.password import hash_password, validate_password_strength, verify_password
from ..auth.roles import UserRole, has_permission
from ..database import get_db
from ..dependencies import TenantQuery, get_current_company
from ..models.company import Company
from ..models.department import Department
from ..models.pending_user import PendingUser
from ..models.shift import Shift
from ..models.user import User
from .schemas import (
    DepartmentRef,
    InviteRequest,
    MessageResponse,
    PasswordChangeRequest,
    PendingUserResponse,
    ProfileUpdate,
    RegistrationRequest,
    SocketDepartment,
    UserDetailResponse,
    UserListItem,
)
from .service import email_registered, load_company_rows, promote_pending_user, send_invitation


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


def _check_password(password: str) -> None:
    is_valid, error_message = validate_password_strength(password)
    if not is_valid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error_message)


@router.post("/invite", response_model=PendingUserResponse, status_code=status.HTTP_201_CREATED)
def invite_user(
    data: InviteRequest,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    company: Company = Depends(get_current_company),
):
    """Invite a staff member (ADMIN only).

    Creates a pending user with the chosen role, departments and shifts and
    emails a registration link valid for one hour.

    Raises:
        HTTPException 403: Inviting with a role above the caller's own
        HTTPException 404: A department or shift id is not in this company
        HTTPException 409: Email already registered or already invited
    """
    if not has_permission(UserRole(current_user.role), data.role):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cannot invite a user with a role higher than your own",
        )

    email = data.email.lower()

    if email_registered(db, email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered as a user")

    if TenantQuery.scoped_query(db, PendingUser, company.id).filter(PendingUser.email == email).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Invitation already sent for this email")

    departments = load_company_rows(
        db, Department, data.department_ids, company.id, "One or more departments not found"
    )
    shifts = load_company_rows(db, Shift, data.shift_ids, company.id, "One or more shifts not found")

    pending_user = PendingUser(company_id=company.id, email=email, role=data.role.value)
    pending_user.departments = departments
    pending_user.shifts = shifts
    db.add(pending_user)

    try:
        db.flush()
        log_from_request(
            db=db,
            request=request,
            company_id=company.id,
            action="USER_INVITED",
            actor_id=current_user.id,
            entity_type="pending_user",
            entity_id=pending_user.id,
            metadata={"email": email, "role": data.role.value}
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Invitation already sent for this email")

    db.refresh(pending_user)
    send_invitation(pending_user, company)

    return pending_user


@router.post("/registration", response_model=UserDetailResponse, status_code=status.HTTP_201_CREATED)
def register_invited_user(
    data: RegistrationRequest,
    request: Request,
    db: Session = Depends(get_db),
    pending_user: PendingUser = Depends(get_pending_user),
):
    """Complete registration with an invitation token as the bearer token.

    Raises:
        HTTPException 400: Password too weak
        HTTPException 401: Missing, invalid or expired invitation token
        HTTPException 404: Invitation not found or already used
        HTTPException 409: Email registered in the meantime
    """
    _check_password(data.password)

    if email_registered(db, pending_user.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered as a user")

    try:
        user = promote_pending_user(
            db,
            pending_user,
            user_name=data.user_name,
            password=data.password,
            profile_uri=data.profile_uri,
            bio=data.bio,
        )
        log_from_request(
            db=db,
            request=request,
            company_id=user.company_id,
            action="USER_REGISTERED",
            actor_id=user.id,
            entity_type="user",
            entity_id=user.id,
            metadata={"email": user.email, "role": user.role}
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered as a user")

    db.refresh(user)
    logger.info("Invited user registered", extra={"company_id": str(user.company_id), "user_id": str(user.id)})
    return user


@router.get("", response_model=List[UserListItem])
def list_users(
    current_user: CurrentUser,
    db: Session = Depends(get_db),
):
    """List the company's users with their departments, newest first."""
    users = (
        TenantQuery.scoped_query(db, User, current_user.company_id)
        .options(selectinload(User.departments))
        .order_by(User.created_at.desc())
        .all()
    )

    return [
        UserListItem(
            id=user.id,
            user_name=user.user_name,
            email=user.email,
            avatar=user.profile_uri,
            role=user.role,
            status=user.status,
            departments=[DepartmentRef.model_validate(d) for d in user.departments],
        )
        for user in users
    ]


@router.get("/socket/essential", response_model=List[SocketDepartment])
def get_socket_essentials(current_user: CurrentUser):
    """Departments the caller belongs to (realtime room names)."""
    return [
        SocketDepartment(department_id=d.id, department_name=d.department_name)
        for d in current_user.departments
    ]


@router.get("/profile", response_model=UserDetailResponse)
def get_profile(current_user: CurrentUser):
    return current_user


@router.patch("/profile", response_model=UserDetailResponse)
def update_profile(
    data: ProfileUpdate,
    request: Request,
    current_user: CurrentUser,
    db: Session = Depends(get_db),
):
    """Update the caller's profile.

    role and status may only be changed by ADMIN or OWNER users, and the
    OWNER role can only be granted by an OWNER.

    Raises:
        HTTPException 403: Non-admin changing role/status, or granting OWNER as ADMIN
    """
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    caller_role = UserRole(current_user.role)

    if ("role" in changes or "status" in changes) and not has_permission(caller_role, UserRole.ADMIN):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admins can change role or status",
        )

    new_role = changes.get("role")
    if new_role is not None and not has_permission(caller_role, new_role):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cannot assign a role higher than your own",
        )

    old_role = current_user.role
    for field, value in changes.items():
        setattr(current_user, field, value.value if field in ("role", "status") else value)

    log_from_request(
        db=db,
        request=request,
        company_id=current_user.company_id,
        action="USER_ROLE_CHANGED" if new_role is not None and new_role.value != old_role else "USER_UPDATED",
        actor_id=current_user.id,
        entity_type="user",
        entity_id=current_user.id,
        metadata={"fields": sorted(changes.keys()), "old_role": old_role, "new_role": current_user.role}
    )
    db.commit()
    db.refresh(current_user)
    return current_user


@router.patch("/profile/password", response_model=MessageResponse)
def change_password(
    data: PasswordChangeRequest,
    request: Request,
    current_user: CurrentUser,
    db: Session = Depends(get_db),
):
    """Change the caller's password.

    Raises:
        HTTPException 400: Old password incorrect or new password too weak
    """
    if not verify_password(data.old_password, current_user.password_hash):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Old password is incorrect")

    _check_password(data.new_password)

    current_user.password_hash = hash_password(data.new_password)
    log_from_request(
        db=db,
        request=request,
        company_id=current_user.company_id,
        action="PASSWORD_CHANGED",
        actor_id=current_user.id,
        entity_type="user",
        entity_id=current_user.id,
    )
    db.commit()

    return MessageResponse(message="Password updated successfully")
