"""Audit logging service for security events.

Central interface for writing audit log entries. Entries are added to the
caller's session and flushed; the caller's commit makes them durable
together with the change they describe.

Audit Events:
- COMPANY_CREATED, COMPANY_UPDATED
- LOGIN_SUCCESS, LOGIN_FAILED
- USER_INVITED, USER_REGISTERED, USER_UPDATED, USER_ROLE_CHANGED
- PASSWORD_CHANGED
- DEPARTMENT_CREATED, DEPARTMENT_DELETED
- SOCIAL_CONNECTION_CREATED, SOCIAL_CONNECTION_DELETED, META_ACCOUNT_CONNECTED
- WEBURI_CREATED, WEBURI_DELETED
"""

from sqlalchemy.orm import Session
from uuid import UUID
from typing import Optional, Dict, Any, Union
from fastapi import Request

from ..models.audit_log import AuditLog


def log_audit_event(
    db: Session,
    company_id: UUID,
    action: str,
    actor_id: Optional[UUID] = None,
    entity_type: Optional[str] = None,
    entity_id: Optional[Union[UUID, str]] = None,
    metadata: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> AuditLog:
    """Create an audit log entry.

    Args:
        db: Database session
        company_id: Company the event belongs to
        action: Event action (e.g., "USER_INVITED", "LOGIN_SUCCESS")
        actor_id: User who performed the action (None for anonymous/system events)
        entity_type: Type of entity affected (e.g., "user", "document")
        entity_id: ID of affected entity (UUIDs, filenames and platform ids)
        metadata: Additional context as JSON (e.g., {"old_role": "EMPLOYEE", "new_role": "ADMIN"})
        ip_address: Client IP address (IPv4 or IPv6)
        user_agent: Client User-Agent header

    Returns:
        AuditLog: The created audit log entry
    """
    audit_entry = AuditLog(
        company_id=company_id,
        actor_id=actor_id,
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id is not None else None,
        metadata_json=metadata,
        ip_address=ip_address,
        user_agent=user_agent,
    )

    db.add(audit_entry)
    db.flush()

    return audit_entry


def get_client_ip(request: Request) -> Optional[str]:
    """Client IP, honouring the first hop of X-Forwarded-For."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else None


def log_from_request(
    db: Session,
    request: Request,
    company_id: UUID,
    action: str,
    actor_id: Optional[UUID] = None,
    entity_type: Optional[str] = None,
    entity_id: Optional[Union[UUID, str]] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """Create audit log entry extracting IP and User-Agent from the request.

    Example:
        log_from_request(
            db=db,
            request=request,
            company_id=current_user.company_id,
            action="USER_INVITED",
            actor_id=current_user.id,
            entity_type="pending_user",
            entity_id=pending_user.id,
            metadata={"email": pending_user.email}
        )
    """
    return log_audit_event(
        db=db,
        company_id=company_id,
        action=action,
        actor_id=actor_id,
        entity_type=entity_type,
        entity_id=entity_id,
        metadata=metadata,
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("User-Agent"),
    )
