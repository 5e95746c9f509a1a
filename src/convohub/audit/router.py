"""Audit log query endpoints (ADMIN only).

Read-only: audit entries are written by the services that perform the
audited actions. ADMIN users can query their company's log with filters
on action, entity type and date range.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from datetime import datetime
from typing import Optional

from ..database import get_db
from ..models.audit_log import AuditLog
from ..auth.dependencies import require_role
from ..auth.roles import UserRole
from ..models.user import User
from .schemas import AuditLogResponse, AuditLogListResponse


router = APIRouter(prefix="/audit", tags=["Audit Logs"])


@router.get(
    "",
    response_model=AuditLogListResponse,
    summary="Query audit logs (ADMIN only)",
    description="Query audit logs with filtering and pagination. Only the caller's company is visible."
)
def query_audit_logs(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    action: Optional[str] = Query(None, description="Filter by action type (e.g., LOGIN_SUCCESS)"),
    entity_type: Optional[str] = Query(None, description="Filter by entity type (e.g., user)"),
    start_date: Optional[datetime] = Query(None, description="Minimum created_at (ISO 8601)"),
    end_date: Optional[datetime] = Query(None, description="Maximum created_at (ISO 8601)"),
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    per_page: int = Query(50, ge=1, le=100, description="Entries per page (max 100)"),
) -> AuditLogListResponse:
    """Query audit logs, newest first.

    Example:
        GET /audit?action=USER_INVITED&page=1&per_page=50
    """
    query = db.query(AuditLog).filter(
        AuditLog.company_id == current_user.company_id
    )

    if action:
        query = query.filter(AuditLog.action == action)

    if entity_type:
        query = query.filter(AuditLog.entity_type == entity_type)

    if start_date:
        query = query.filter(AuditLog.created_at >= start_date)

    if end_date:
        query = query.filter(AuditLog.created_at <= end_date)

    total = query.count()

    offset = (page - 1) * per_page
    entries = query.order_by(AuditLog.created_at.desc()).offset(offset).limit(per_page).all()

    return AuditLogListResponse(
        entries=[AuditLogResponse.model_validate(entry) for entry in entries],
        total=total,
        page=page,
        per_page=per_page
    )
