"""Shift SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import Column, String, Time, DateTime, ForeignKey, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import Base, utcnow


class Shift(Base):
    """A named working time window (same day, start strictly before end)."""
    __tablename__ = "shift"
    __table_args__ = (
        UniqueConstraint("company_id", "shift_name", name="uq_shift_company_name"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    company_id = Column(Uuid, ForeignKey("company.id", ondelete="CASCADE"), nullable=False)
    shift_name = Column(String(100), nullable=False)
    shift_start_time = Column(Time, nullable=False)
    shift_end_time = Column(Time, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    company = relationship("Company", back_populates="shifts")
