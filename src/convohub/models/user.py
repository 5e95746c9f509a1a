"""User SQLAlchemy model"""

import enum
import re
from uuid import uuid4

from sqlalchemy import (
    Column, String, Text, DateTime, ForeignKey, Uuid, CheckConstraint, Index
)
from sqlalchemy.orm import relationship, validates

from .associations import user_departments, user_shifts
from .base import Base, utcnow


class UserStatus(str, enum.Enum):
    """Employment state of a staff user."""
    ACTIVE = "ACTIVE"
    ONLEAVE = "ONLEAVE"
    RETIRED = "RETIRED"


class User(Base):
    """User model representing staff members of a company.

    Each user belongs to one company and has a role determining their
    permissions. Passwords are hashed using Argon2id. Emails are unique
    across the whole system since login is by email alone.
    """
    __tablename__ = "user"

    id = Column(Uuid, primary_key=True, default=uuid4)
    company_id = Column(Uuid, ForeignKey("company.id", ondelete="CASCADE"), nullable=False)
    user_name = Column(String(50), nullable=False)
    email = Column(String(50), nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    profile_uri = Column(String(500), nullable=True)
    bio = Column(String(255), nullable=True)
    role = Column(Text, nullable=False, default="EMPLOYEE")
    status = Column(Text, nullable=False, default=UserStatus.ACTIVE.value)
    last_login_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    company = relationship("Company", back_populates="users")
    departments = relationship("Department", secondary=user_departments, back_populates="users")
    shifts = relationship("Shift", secondary=user_shifts)

    # Constraints
    __table_args__ = (
        CheckConstraint(
            "role IN ('OWNER', 'ADMIN', 'EMPLOYEE', 'GUEST')",
            name='ck_user_role'
        ),
        CheckConstraint(
            "status IN ('ACTIVE', 'ONLEAVE', 'RETIRED')",
            name='ck_user_status'
        ),
        Index("ix_user_company_id", "company_id"),
    )

    @validates('email')
    def validate_email(self, key, value):
        """Basic email format validation"""
        if not re.match(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$', value):
            raise ValueError("Invalid email format")
        return value.lower()

    def to_dict(self):
        """Convert user to dictionary representation (excludes password_hash)"""
        return {
            "id": str(self.id),
            "company_id": str(self.company_id),
            "user_name": self.user_name,
            "email": self.email,
            "role": self.role,
            "status": self.status,
            "last_login_at": self.last_login_at.isoformat() if self.last_login_at else None,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat()
        }
