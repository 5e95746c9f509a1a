"""Customer SQLAlchemy model"""

import enum
from uuid import uuid4

from sqlalchemy import (
    Column, String, Text, Integer, DateTime, ForeignKey, Uuid,
    CheckConstraint, UniqueConstraint, Index
)
from sqlalchemy.orm import relationship

from .base import Base, utcnow


class CustomerSource(str, enum.Enum):
    """Channel a customer signed up through."""
    WEB = "WEB"
    FACEBOOK = "FACEBOOK"
    WHATSAPP = "WHATSAPP"
    INSTAGRAM = "INSTAGRAM"
    TWITTER = "TWITTER"
    TELEGRAM = "TELEGRAM"
    OTHER = "OTHER"


class Customer(Base):
    """End customer chatting with a company.

    A customer is identified by (company, contact, source): the same phone
    number may exist once per channel.
    """
    __tablename__ = "customer"
    __table_args__ = (
        UniqueConstraint("company_id", "contact", "source", name="uq_customer_company_contact_source"),
        CheckConstraint(
            "source IN ('WEB', 'FACEBOOK', 'WHATSAPP', 'INSTAGRAM', 'TWITTER', 'TELEGRAM', 'OTHER')",
            name="ck_customer_source"
        ),
        Index("ix_customer_company_id", "company_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    company_id = Column(Uuid, ForeignKey("company.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    profile_uri = Column(String(500), nullable=True)
    contact = Column(String(255), nullable=False)
    password_hash = Column(Text, nullable=False)
    source = Column(Text, nullable=False, default=CustomerSource.WEB.value)
    conversation_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    company = relationship("Company", back_populates="customers")
