"""Shift endpoints.

Reads are open to every staff role; writes require ADMIN.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..auth.dependencies import require_role
from ..auth.roles import UserRole
from ..company.schemas import DeleteResponse
from ..database import get_db
from ..dependencies import TenantQuery, get_company_id
from ..models.shift import Shift
from ..models.user import User
from .schemas import ShiftCreate, ShiftResponse, ShiftUpdate
from .service import INVALID_WINDOW_MESSAGE, is_valid_window, parse_shift_time


router = APIRouter(prefix="/shift", tags=["Shifts"])

DUPLICATE_NAME = "Shift with this name already exists"


def _name_taken(db: Session, company_id: UUID, name: str, exclude_id: UUID = None) -> bool:
    query = TenantQuery.scoped_query(db, Shift, company_id).filter(Shift.shift_name == name)
    if exclude_id:
        query = query.filter(Shift.id != exclude_id)
    return query.first() is not None


@router.post("", response_model=ShiftResponse, status_code=status.HTTP_201_CREATED)
def create_shift(
    data: ShiftCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.ADMIN)),
):
    """Create a shift (ADMIN only).

    Raises:
        HTTPException 400: End time not after start time
        HTTPException 409: Name already used in this company
    """
    start = parse_shift_time(data.shift_start_time)
    end = parse_shift_time(data.shift_end_time)
    if not is_valid_window(start, end):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_WINDOW_MESSAGE)

    if _name_taken(db, current_user.company_id, data.shift_name):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_NAME)

    shift = Shift(
        company_id=current_user.company_id,
        shift_name=data.shift_name,
        shift_start_time=start,
        shift_end_time=end,
    )
    db.add(shift)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_NAME)

    db.refresh(shift)
    return shift


@router.get("", response_model=list[ShiftResponse])
def list_shifts(
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_company_id),
):
    return (
        TenantQuery.scoped_query(db, Shift, company_id)
        .order_by(Shift.shift_start_time.asc())
        .all()
    )


@router.get("/{shift_id}", response_model=ShiftResponse)
def get_shift(
    shift_id: UUID,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_company_id),
):
    return TenantQuery.get_or_404(db, Shift, shift_id, company_id, detail="Shift not found")


@router.patch("/{shift_id}", response_model=ShiftResponse)
def update_shift(
    shift_id: UUID,
    data: ShiftUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.ADMIN)),
):
    """Update a shift (ADMIN only).

    The time window is re-validated against the stored bound when only one
    bound is patched.
    """
    shift = TenantQuery.get_or_404(db, Shift, shift_id, current_user.company_id, detail="Shift not found")
    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    start = parse_shift_time(changes["shift_start_time"]) if "shift_start_time" in changes else shift.shift_start_time
    end = parse_shift_time(changes["shift_end_time"]) if "shift_end_time" in changes else shift.shift_end_time
    if not is_valid_window(start, end):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_WINDOW_MESSAGE)

    new_name = changes.get("shift_name")
    if new_name and _name_taken(db, current_user.company_id, new_name, exclude_id=shift.id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_NAME)

    if new_name:
        shift.shift_name = new_name
    shift.shift_start_time = start
    shift.shift_end_time = end

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_NAME)

    db.refresh(shift)
    return shift


@router.delete("/{shift_id}", response_model=DeleteResponse)
def delete_shift(
    shift_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.ADMIN)),
):
    """Delete a shift (ADMIN only)."""
    shift = TenantQuery.get_or_404(db, Shift, shift_id, current_user.company_id, detail="Shift not found")
    db.delete(shift)
    db.commit()
    return DeleteResponse(id=shift_id)
