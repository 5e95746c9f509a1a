"""Join tables linking users and pending users to departments and shifts"""

from sqlalchemy import Column, ForeignKey, Table, Uuid

from .base import Base


user_departments = Table(
    "user_departments",
    Base.metadata,
    Column("user_id", Uuid, ForeignKey("user.id", ondelete="CASCADE"), primary_key=True),
    Column("department_id", Uuid, ForeignKey("department.id", ondelete="CASCADE"), primary_key=True),
)

user_shifts = Table(
    "user_shifts",
    Base.metadata,
    Column("user_id", Uuid, ForeignKey("user.id", ondelete="CASCADE"), primary_key=True),
    Column("shift_id", Uuid, ForeignKey("shift.id", ondelete="CASCADE"), primary_key=True),
)

pending_user_departments = Table(
    "pending_user_departments",
    Base.metadata,
    Column("pending_user_id", Uuid, ForeignKey("pending_user.id", ondelete="CASCADE"), primary_key=True),
    Column("department_id", Uuid, ForeignKey("department.id", ondelete="CASCADE"), primary_key=True),
)

pending_user_shifts = Table(
    "pending_user_shifts",
    Base.metadata,
    Column("pending_user_id", Uuid, ForeignKey("pending_user.id", ondelete="CASCADE"), primary_key=True),
    Column("shift_id", Uuid, ForeignKey("shift.id", ondelete="CASCADE"), primary_key=True),
)
