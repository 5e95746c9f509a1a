"""Company profile endpoints.

Every operation acts on the caller's own company; the company id always
comes from the verified token.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..audit.service import log_from_request
from ..auth.dependencies import CurrentUser, require_role
from ..auth.roles import UserRole
from ..auth.schemas import UserResponse
from ..database import get_db
from ..dependencies import get_current_company
from ..models.company import Company
from ..models.user import User
from .schemas import CompanyProfileResponse, CompanyResponse, CompanyUpdate, DeleteResponse


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/company", tags=["Company"])


@router.get("/profile", response_model=CompanyProfileResponse)
def get_company_profile(
    current_user: CurrentUser,
    company: Company = Depends(get_current_company),
):
    """Get the caller's company profile and user record."""
    return CompanyProfileResponse(
        company=CompanyResponse.model_validate(company),
        user=UserResponse.model_validate(current_user),
    )


@router.patch("/update", response_model=CompanyResponse)
def update_company(
    data: CompanyUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    company: Company = Depends(get_current_company),
):
    """Update company profile fields (ADMIN only).

    Raises:
        HTTPException 404: Company not found
        HTTPException 409: Company name or subdomain already taken
    """
    changes = data.model_dump(exclude_unset=True)

    if "company_name" in changes and changes["company_name"].strip() != company.company_name:
        if db.query(Company).filter(
            Company.company_name == changes["company_name"].strip(),
            Company.id != company.id
        ).first():
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Company name already exists")

    if "subdomain" in changes and changes["subdomain"] != company.subdomain:
        if db.query(Company).filter(
            Company.subdomain == changes["subdomain"],
            Company.id != company.id
        ).first():
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Subdomain already exists")

    for field, value in changes.items():
        setattr(company, field, value)

    try:
        log_from_request(
            db=db,
            request=request,
            company_id=company.id,
            action="COMPANY_UPDATED",
            actor_id=current_user.id,
            entity_type="company",
            entity_id=company.id,
            metadata={"fields": sorted(changes.keys())}
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Company name or subdomain already exists")

    db.refresh(company)
    return company


@router.delete("/delete", response_model=DeleteResponse)
def delete_company(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.OWNER)),
    company: Company = Depends(get_current_company),
):
    """Delete the company and every row it owns (OWNER only).

    Tenant tables reference company.id with ON DELETE CASCADE, so users,
    departments, shifts, customers, conversations, agents, resources,
    connections and audit entries are removed together.
    """
    company_id = company.id
    user_id = current_user.id
    db.delete(company)
    db.commit()

    logger.warning(
        "Company deleted",
        extra={"company_id": str(company_id), "user_id": str(user_id)}
    )
    return DeleteResponse(id=company_id)
