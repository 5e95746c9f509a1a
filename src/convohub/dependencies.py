"""Global FastAPI dependencies for tenant isolation.

This module provides:
- get_company_id: Derive company_id from the authenticated user
- get_current_company: Load the caller's Company row
- TenantQuery: helpers for company-scoped queries

All multi-tenant endpoints should use get_company_id so the tenant comes
from the verified token, never from the request body or query string.
"""

from typing import Optional
from uuid import UUID
from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from .database import get_db
from .auth.dependencies import get_current_user
from .models.company import Company
from .models.user import User


def get_company_id(current_user: User = Depends(get_current_user)) -> UUID:
    """Return the tenant context for the current request.

    Example:
        @router.get("/shift")
        def list_shifts(
            db: Session = Depends(get_db),
            company_id: UUID = Depends(get_company_id)
        ):
            return TenantQuery.scoped_query(db, Shift, company_id).all()
    """
    if not current_user.company_id:
        # Guarded by NOT NULL constraint
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="User has no company association",
        )

    return current_user.company_id


def get_current_company(
    company_id: UUID = Depends(get_company_id),
    db: Session = Depends(get_db)
) -> Company:
    """Load the caller's company.

    Raises:
        HTTPException 404: If the company no longer exists
    """
    company = db.query(Company).filter(Company.id == company_id).first()
    if not company:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Company with ID {company_id} not found",
        )

    return company


class TenantQuery:
    """Utility class for building company-scoped queries.

    Example:
        agents = TenantQuery.scoped_query(db, AIAgent, company_id).all()
    """

    @staticmethod
    def scoped_query(session: Session, model, company_id: UUID):
        """Create a query filtered by company_id.

        Raises:
            AttributeError: If model doesn't have company_id attribute
        """
        if not hasattr(model, 'company_id'):
            raise AttributeError(f"Model {model.__name__} does not have company_id column")

        return session.query(model).filter(model.company_id == company_id)

    @staticmethod
    def get_or_404(
        session: Session,
        model,
        record_id,
        company_id: UUID,
        detail: Optional[str] = None,
        id_attr: str = "id",
    ):
        """Get a record by ID with company scoping, or raise 404.

        Returns 404 both for records that don't exist and for records that
        belong to another company, so tenants cannot probe each other's ids.

        Args:
            session: SQLAlchemy session
            model: SQLAlchemy model class
            record_id: Primary key value to fetch
            company_id: Company ID to scope by
            detail: Error message (default "<Model> not found")
            id_attr: Name of the primary key attribute

        Raises:
            HTTPException 404: If record not found or belongs to another company
        """
        record = TenantQuery.scoped_query(session, model, company_id).filter(
            getattr(model, id_attr) == record_id
        ).first()

        if not record:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=detail or f"{model.__name__} not found",
            )

        return record
