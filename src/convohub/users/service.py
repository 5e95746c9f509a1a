"""Invitation and registration workflow.

An invitation creates a PendingUser carrying the company, role and
memberships chosen by the admin. Registration turns it into a User in one
transaction and deletes the pending row, so an invitation token can only be
redeemed once.
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..auth.jwt import create_invite_token
from ..auth.password import hash_password
from ..config import get_settings
from ..dependencies import TenantQuery
from ..models.company import Company
from ..models.pending_user import PendingUser
from ..models.user import User, UserStatus
from ..workers.mail_tasks import send_invitation_email


logger = logging.getLogger(__name__)


def load_company_rows(db: Session, model, ids: List[UUID], company_id: UUID, detail: str) -> list:
    """Fetch rows by id within one company; 404 if any id is missing or foreign."""
    unique_ids = set(ids)
    if not unique_ids:
        return []

    rows = TenantQuery.scoped_query(db, model, company_id).filter(model.id.in_(unique_ids)).all()
    if len(rows) != len(unique_ids):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
    return rows


def email_registered(db: Session, email: str) -> bool:
    return db.query(User).filter(func.lower(User.email) == email.lower()).first() is not None


def invite_url(token: str) -> str:
    return f"{get_settings().FRONTEND_EMPLOYEE_INVITE_URL}?token={token}"


def send_invitation(pending_user: PendingUser, company: Company) -> None:
    """Sign an invitation token and enqueue the invitation email."""
    token = create_invite_token(pending_user.id, pending_user.company_id)
    send_invitation_email.delay(
        email=pending_user.email,
        company_name=company.company_name,
        invite_url=invite_url(token),
        company_id=str(pending_user.company_id),
    )
    logger.info(
        f"Invitation enqueued for {pending_user.email}",
        extra={"company_id": str(pending_user.company_id)}
    )


def promote_pending_user(
    db: Session,
    pending_user: PendingUser,
    user_name: str,
    password: str,
    profile_uri: Optional[str] = None,
    bio: Optional[str] = None,
) -> User:
    """Create the User for a redeemed invitation and delete the invitation.

    Department employee counts grow by one for every department the new
    user joins. The caller commits.
    """
    departments = list(pending_user.departments)
    shifts = list(pending_user.shifts)

    user = User(
        company_id=pending_user.company_id,
        user_name=user_name,
        email=pending_user.email,
        password_hash=hash_password(password),
        profile_uri=profile_uri,
        bio=bio,
        role=pending_user.role,
        status=UserStatus.ACTIVE.value,
    )
    user.departments = departments
    user.shifts = shifts

    for department in departments:
        department.employee_count = (department.employee_count or 0) + 1

    db.add(user)
    db.delete(pending_user)
    db.flush()
    return user
