"""Web URI resource endpoints

Company web pages registered as knowledge sources for AI agents. A URI is
unique per company; its status tracks ingestion (QUEUED, SYNCED, FAILED).
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..audit.service import log_from_request
from ..auth.dependencies import CurrentAdmin, CurrentUser
from ..database import get_db
from ..dependencies import TenantQuery
from ..models.weburi_resource import WebURIResource, WebURIStatus
from .schemas import WebURICreate, WebURIResponse, WebURIUpdate


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/weburi-resources", tags=["Web URI Resources"])

DUPLICATE_URI = "URI already exists for this company"


def _get_resource(db: Session, resource_id: UUID, company_id: UUID) -> WebURIResource:
    return TenantQuery.get_or_404(
        db, WebURIResource, resource_id, company_id,
        detail=f"WebURI Resource with ID {resource_id} not found",
    )


def _uri_taken(db: Session, company_id: UUID, uri: str, exclude_id: Optional[UUID] = None) -> bool:
    query = TenantQuery.scoped_query(db, WebURIResource, company_id).filter(WebURIResource.uri == uri)
    if exclude_id is not None:
        query = query.filter(WebURIResource.id != exclude_id)
    return query.first() is not None


@router.post("", response_model=WebURIResponse, status_code=status.HTTP_201_CREATED)
def create_resource(
    data: WebURICreate,
    request: Request,
    current_user: CurrentAdmin,
    db: Session = Depends(get_db),
):
    """Register a URI (ADMIN only).

    Raises:
        HTTPException 409: URI already registered for this company
    """
    uri = str(data.uri)
    if _uri_taken(db, current_user.company_id, uri):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_URI)

    resource = WebURIResource(company_id=current_user.company_id, uri=uri, status=data.status.value)
    db.add(resource)

    try:
        db.flush()
        log_from_request(
            db=db,
            request=request,
            company_id=current_user.company_id,
            action="WEBURI_CREATED",
            actor_id=current_user.id,
            entity_type="weburi_resource",
            entity_id=resource.id,
            metadata={"uri": uri}
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_URI)

    db.refresh(resource)
    return resource


@router.get("", response_model=List[WebURIResponse])
def list_resources(
    current_user: CurrentUser,
    status_filter: Optional[WebURIStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
):
    """List the company's URIs, newest first, optionally filtered by ?status=."""
    query = TenantQuery.scoped_query(db, WebURIResource, current_user.company_id)
    if status_filter is not None:
        query = query.filter(WebURIResource.status == status_filter.value)
    return query.order_by(WebURIResource.created_at.desc()).all()


@router.get("/{resource_id}", response_model=WebURIResponse)
def get_resource(resource_id: UUID, current_user: CurrentUser, db: Session = Depends(get_db)):
    return _get_resource(db, resource_id, current_user.company_id)


@router.patch("/{resource_id}", response_model=WebURIResponse)
def update_resource(
    resource_id: UUID,
    data: WebURIUpdate,
    current_user: CurrentAdmin,
    db: Session = Depends(get_db),
):
    """Update a URI and/or status (ADMIN only)."""
    resource = _get_resource(db, resource_id, current_user.company_id)

    if data.uri is not None:
        uri = str(data.uri)
        if _uri_taken(db, current_user.company_id, uri, exclude_id=resource.id):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_URI)
        resource.uri = uri
    if data.status is not None:
        resource.status = data.status.value

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_URI)

    db.refresh(resource)
    return resource


def _set_status(db: Session, resource_id: UUID, company_id: UUID, new_status: WebURIStatus) -> WebURIResource:
    resource = _get_resource(db, resource_id, company_id)
    resource.status = new_status.value
    db.commit()
    db.refresh(resource)
    logger.info(
        f"WebURI resource {resource_id} marked {new_status.value}",
        extra={"company_id": str(company_id)}
    )
    return resource


@router.patch("/{resource_id}/status/synced", response_model=WebURIResponse)
def mark_synced(resource_id: UUID, current_user: CurrentAdmin, db: Session = Depends(get_db)):
    return _set_status(db, resource_id, current_user.company_id, WebURIStatus.SYNCED)


@router.patch("/{resource_id}/status/queued", response_model=WebURIResponse)
def mark_queued(resource_id: UUID, current_user: CurrentAdmin, db: Session = Depends(get_db)):
    return _set_status(db, resource_id, current_user.company_id, WebURIStatus.QUEUED)


@router.patch("/{resource_id}/status/failed", response_model=WebURIResponse)
def mark_failed(resource_id: UUID, current_user: CurrentAdmin, db: Session = Depends(get_db)):
    return _set_status(db, resource_id, current_user.company_id, WebURIStatus.FAILED)


@router.delete("/{resource_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_resource(
    resource_id: UUID,
    request: Request,
    current_user: CurrentAdmin,
    db: Session = Depends(get_db),
):
    resource = _get_resource(db, resource_id, current_user.company_id)
    log_from_request(
        db=db,
        request=request,
        company_id=current_user.company_id,
        action="WEBURI_DELETED",
        actor_id=current_user.id,
        entity_type="weburi_resource",
        entity_id=resource.id,
        metadata={"uri": resource.uri}
    )
    db.delete(resource)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
