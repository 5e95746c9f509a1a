"""PendingUser SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship

from .associations import pending_user_departments, pending_user_shifts
from .base import Base, utcnow


class PendingUser(Base):
    """An invited staff member who has not completed registration yet.

    Promoted to a User (and deleted) when the invitation token is redeemed.
    """
    __tablename__ = "pending_user"
    __table_args__ = (
        UniqueConstraint("email", "company_id", name="uq_pending_user_email_company"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    company_id = Column(Uuid, ForeignKey("company.id", ondelete="CASCADE"), nullable=False)
    email = Column(String(50), nullable=False)
    role = Column(Text, nullable=False, default="EMPLOYEE")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    company = relationship("Company", back_populates="pending_users")
    departments = relationship("Department", secondary=pending_user_departments)
    shifts = relationship("Shift", secondary=pending_user_shifts)
