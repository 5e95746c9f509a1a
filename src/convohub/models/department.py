"""Department SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import (
    Column, String, Text, Integer, DateTime, ForeignKey, Uuid, UniqueConstraint
)
from sqlalchemy.orm import relationship

from .associations import user_departments
from .base import Base, utcnow


class Department(Base):
    """A team inside a company that users can be members of."""
    __tablename__ = "department"
    __table_args__ = (
        UniqueConstraint("company_id", "department_name", name="uq_department_company_name"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    company_id = Column(Uuid, ForeignKey("company.id", ondelete="CASCADE"), nullable=False)
    department_name = Column(String(150), nullable=False)
    description = Column(Text, nullable=True)
    department_profile_uri = Column(String(500), nullable=True)
    employee_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    company = relationship("Company", back_populates="departments")
    users = relationship("User", secondary=user_departments, back_populates="departments")

    def __repr__(self):
        return f"<Department(id={self.id}, name='{self.department_name}')>"
