"""Social connection endpoints (ADMIN only)

Stores access tokens for third-party platforms. Each company may hold one
manually created connection per platform type; Facebook user and page
connections are also written by the Meta OAuth callback.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..audit.service import log_from_request
from ..auth.dependencies import CurrentAdmin
from ..database import get_db
from ..dependencies import TenantQuery
from ..models.social_connection import SocialConnection
from .schemas import (
    PlatformCount,
    SocialConnectionCreate,
    SocialConnectionDeleteResponse,
    SocialConnectionResponse,
    SocialConnectionStats,
    SocialConnectionVerification,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/social-connections", tags=["Social Connections"])


def _get_connection(db: Session, connection_id: str, company_id) -> SocialConnection:
    return TenantQuery.get_or_404(
        db, SocialConnection, connection_id, company_id,
        detail=f"Social connection with ID {connection_id} not found or access denied",
    )


@router.get("", response_model=List[SocialConnectionResponse])
def list_connections(current_user: CurrentAdmin, db: Session = Depends(get_db)):
    """List the company's connections, newest first, with masked tokens."""
    return (
        TenantQuery.scoped_query(db, SocialConnection, current_user.company_id)
        .order_by(SocialConnection.created_at.desc())
        .all()
    )


@router.post("", response_model=SocialConnectionResponse, status_code=status.HTTP_201_CREATED)
def create_connection(
    data: SocialConnectionCreate,
    request: Request,
    current_user: CurrentAdmin,
    db: Session = Depends(get_db),
):
    """Create a connection for a platform type.

    Raises:
        HTTPException 409: The company already has a connection of this type
    """
    platform_type = data.platform_type.value
    duplicate_detail = (
        f"A {platform_type} connection already exists for this company. "
        "Please delete the existing one first."
    )

    exists = (
        TenantQuery.scoped_query(db, SocialConnection, current_user.company_id)
        .filter(SocialConnection.platform_type == platform_type)
        .first()
    )
    if exists:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=duplicate_detail)

    connection = SocialConnection(
        company_id=current_user.company_id,
        platform_name=data.platform_name,
        platform_type=platform_type,
        platform_token=data.platform_token,
    )
    db.add(connection)

    try:
        db.flush()
        log_from_request(
            db=db,
            request=request,
            company_id=current_user.company_id,
            action="SOCIAL_CONNECTION_CREATED",
            actor_id=current_user.id,
            entity_type="social_connection",
            entity_id=connection.id,
            metadata={"platform_type": platform_type}
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=duplicate_detail)

    db.refresh(connection)
    return connection


@router.get("/stats/overview", response_model=SocialConnectionStats)
def get_stats(current_user: CurrentAdmin, db: Session = Depends(get_db)):
    """Connection counts, total and per platform type."""
    rows = (
        db.query(SocialConnection.platform_type, func.count(SocialConnection.id))
        .filter(SocialConnection.company_id == current_user.company_id)
        .group_by(SocialConnection.platform_type)
        .order_by(SocialConnection.platform_type)
        .all()
    )
    by_platform = [PlatformCount(platform_type=t, count=c) for t, c in rows]
    return SocialConnectionStats(total=sum(p.count for p in by_platform), by_platform=by_platform)


@router.get("/{connection_id}", response_model=SocialConnectionResponse)
def get_connection(connection_id: str, current_user: CurrentAdmin, db: Session = Depends(get_db)):
    return _get_connection(db, connection_id, current_user.company_id)


@router.get("/{connection_id}/verify", response_model=SocialConnectionVerification)
def verify_connection(connection_id: str, current_user: CurrentAdmin, db: Session = Depends(get_db)):
    """Check that a stored connection still has a token.

    Only presence is checked; Facebook tokens can be inspected with
    /auth/meta/debug/token.
    """
    connection = _get_connection(db, connection_id, current_user.company_id)
    valid = bool(connection.platform_token)
    return SocialConnectionVerification(
        valid=valid,
        message="Connection token is valid" if valid else "Connection token is invalid or expired",
    )


@router.delete("/{connection_id}", response_model=SocialConnectionDeleteResponse)
def delete_connection(
    connection_id: str,
    request: Request,
    current_user: CurrentAdmin,
    db: Session = Depends(get_db),
):
    connection = _get_connection(db, connection_id, current_user.company_id)
    log_from_request(
        db=db,
        request=request,
        company_id=current_user.company_id,
        action="SOCIAL_CONNECTION_DELETED",
        actor_id=current_user.id,
        entity_type="social_connection",
        entity_id=connection.id,
        metadata={"platform_type": connection.platform_type}
    )
    db.delete(connection)
    db.commit()

    logger.info(
        f"Social connection deleted: {connection_id}",
        extra={"company_id": str(current_user.company_id), "user_id": str(current_user.id)}
    )
    return SocialConnectionDeleteResponse(id=connection_id)
