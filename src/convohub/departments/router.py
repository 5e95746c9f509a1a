"""Department endpoints.

Reads are open to every staff role; writes require ADMIN.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from ..audit.service import log_from_request
from ..auth.dependencies import require_role
from ..auth.roles import UserRole
from ..company.schemas import DeleteResponse
from ..database import get_db
from ..dependencies import TenantQuery, get_company_id
from ..models.department import Department
from ..models.user import User
from .schemas import (
    DepartmentCreate,
    DepartmentMember,
    DepartmentResponse,
    DepartmentUpdate,
    DepartmentWithUsers,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/department", tags=["Departments"])

# Members shown per department in the listing
MEMBER_PREVIEW_LIMIT = 10

DUPLICATE_NAME = "Department with this name already exists"


def _name_taken(db: Session, company_id: UUID, name: str, exclude_id: UUID = None) -> bool:
    query = TenantQuery.scoped_query(db, Department, company_id).filter(
        Department.department_name == name
    )
    if exclude_id:
        query = query.filter(Department.id != exclude_id)
    return query.first() is not None


@router.post("", response_model=DepartmentResponse, status_code=status.HTTP_201_CREATED)
def create_department(
    data: DepartmentCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.ADMIN)),
):
    """Create a department (ADMIN only).

    Raises:
        HTTPException 409: Name already used in this company
    """
    if _name_taken(db, current_user.company_id, data.department_name):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_NAME)

    department = Department(company_id=current_user.company_id, **data.model_dump())
    db.add(department)

    try:
        db.flush()
        log_from_request(
            db=db,
            request=request,
            company_id=current_user.company_id,
            action="DEPARTMENT_CREATED",
            actor_id=current_user.id,
            entity_type="department",
            entity_id=department.id,
            metadata={"department_name": department.department_name}
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_NAME)

    db.refresh(department)
    return department


@router.get("", response_model=list[DepartmentWithUsers])
def list_departments(
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_company_id),
):
    """List departments with up to 10 members each."""
    departments = (
        TenantQuery.scoped_query(db, Department, company_id)
        .options(selectinload(Department.users))
        .order_by(Department.created_at.desc())
        .all()
    )

    result = []
    for department in departments:
        entry = DepartmentWithUsers.model_validate(department)
        entry.users = [
            DepartmentMember.model_validate(user)
            for user in department.users[:MEMBER_PREVIEW_LIMIT]
        ]
        result.append(entry)
    return result


@router.get("/{department_id}", response_model=DepartmentResponse)
def get_department(
    department_id: UUID,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_company_id),
):
    return TenantQuery.get_or_404(db, Department, department_id, company_id, detail="Department not found")


@router.patch("/{department_id}", response_model=DepartmentResponse)
def update_department(
    department_id: UUID,
    data: DepartmentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.ADMIN)),
):
    """Update a department (ADMIN only).

    Raises:
        HTTPException 404: Department not found in this company
        HTTPException 409: New name collides with another department
    """
    department = TenantQuery.get_or_404(
        db, Department, department_id, current_user.company_id, detail="Department not found"
    )
    changes = data.model_dump(exclude_unset=True)

    new_name = changes.get("department_name")
    if new_name and _name_taken(db, current_user.company_id, new_name, exclude_id=department.id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_NAME)

    for field, value in changes.items():
        setattr(department, field, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_NAME)

    db.refresh(department)
    return department


@router.delete("/{department_id}", response_model=DeleteResponse)
def delete_department(
    department_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.ADMIN)),
):
    """Delete a department (ADMIN only). Memberships are removed with it."""
    department = TenantQuery.get_or_404(
        db, Department, department_id, current_user.company_id, detail="Department not found"
    )

    log_from_request(
        db=db,
        request=request,
        company_id=current_user.company_id,
        action="DEPARTMENT_DELETED",
        actor_id=current_user.id,
        entity_type="department",
        entity_id=department.id,
        metadata={"department_name": department.department_name}
    )
    db.delete(department)
    db.commit()

    return DeleteResponse(id=department_id)
