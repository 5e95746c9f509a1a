"""WebURIResource SQLAlchemy model"""

import enum
from uuid import uuid4

from sqlalchemy import (
    Column, String, Text, DateTime, ForeignKey, Uuid, CheckConstraint, UniqueConstraint
)
from sqlalchemy.orm import relationship

from .base import Base, utcnow


class WebURIStatus(str, enum.Enum):
    """Ingestion state of a web page used as knowledge source."""
    SYNCED = "SYNCED"
    QUEUED = "QUEUED"
    FAILED = "FAILED"


class WebURIResource(Base):
    """A company website URL registered as a knowledge source."""
    __tablename__ = "weburi_resource"
    __table_args__ = (
        UniqueConstraint("company_id", "uri", name="uq_weburi_company_uri"),
        CheckConstraint("status IN ('SYNCED', 'QUEUED', 'FAILED')", name="ck_weburi_status"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    company_id = Column(Uuid, ForeignKey("company.id", ondelete="CASCADE"), nullable=False)
    uri = Column(String(500), nullable=False)
    status = Column(Text, nullable=False, default=WebURIStatus.QUEUED.value)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    company = relationship("Company", back_populates="weburi_resources")
