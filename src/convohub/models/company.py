"""Company model - Root entity for multi-tenant isolation"""

import enum
import re
from uuid import uuid4

from sqlalchemy import Column, String, Text, DateTime, Uuid, CheckConstraint
from sqlalchemy.orm import validates, relationship

from .base import Base, utcnow


class CompanyStatus(str, enum.Enum):
    """Lifecycle state of a company account."""
    ACTIVE = "ACTIVE"
    PENDING = "PENDING"
    REJECTED = "REJECTED"


class Company(Base):
    """
    Company model - Root entity for the multi-tenant system.

    Each company represents a distinct tenant with isolated data.
    Every tenant table references company.id and is removed with it.
    """
    __tablename__ = "company"
    __table_args__ = (
        CheckConstraint(
            "status IN ('ACTIVE', 'PENDING', 'REJECTED')",
            name="ck_company_status"
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    company_name = Column(String(255), nullable=False, unique=True)
    subdomain = Column(String(50), nullable=False, unique=True)
    logo = Column(String(500), nullable=True)
    banner = Column(String(500), nullable=True)
    bio = Column(String(255), nullable=True)
    company_category = Column(String(100), nullable=True)
    country = Column(String(100), nullable=True)
    language = Column(String(10), nullable=True)
    timezone = Column(String(50), nullable=True)
    status = Column(Text, nullable=False, default=CompanyStatus.PENDING.value)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Tenant-owned rows go away with the company
    users = relationship("User", back_populates="company", cascade="all, delete-orphan", passive_deletes=True)
    pending_users = relationship("PendingUser", back_populates="company", cascade="all, delete-orphan", passive_deletes=True)
    departments = relationship("Department", back_populates="company", cascade="all, delete-orphan", passive_deletes=True)
    shifts = relationship("Shift", back_populates="company", cascade="all, delete-orphan", passive_deletes=True)
    customers = relationship("Customer", back_populates="company", cascade="all, delete-orphan", passive_deletes=True)
    ai_agents = relationship("AIAgent", back_populates="company", cascade="all, delete-orphan", passive_deletes=True)
    conversations = relationship("Conversation", back_populates="company", cascade="all, delete-orphan", passive_deletes=True)
    weburi_resources = relationship("WebURIResource", back_populates="company", cascade="all, delete-orphan", passive_deletes=True)
    social_connections = relationship("SocialConnection", back_populates="company", cascade="all, delete-orphan", passive_deletes=True)
    audit_logs = relationship("AuditLog", cascade="all, delete-orphan", passive_deletes=True)

    @validates('subdomain')
    def validate_subdomain(self, key, value):
        """
        Ensure subdomain is URL-friendly.

        Pattern: ^[a-z0-9-]+$, 3 to 50 characters.
        Valid: acme, acme-support-2
        Invalid: Acme, acme_support, ac

        Raises:
            ValueError: If subdomain doesn't match pattern or length requirements
        """
        if not re.match(r'^[a-z0-9-]+$', value):
            raise ValueError(
                "Subdomain must contain only lowercase letters, numbers, and hyphens"
            )
        if len(value) < 3 or len(value) > 50:
            raise ValueError("Subdomain must be between 3 and 50 characters")
        return value

    @validates('company_name')
    def validate_company_name(self, key, value):
        if not value or len(value.strip()) == 0:
            raise ValueError("Company name cannot be empty")
        if len(value) > 255:
            raise ValueError("Company name cannot exceed 255 characters")
        return value.strip()

    def __repr__(self):
        return f"<Company(id={self.id}, subdomain='{self.subdomain}', name='{self.company_name}')>"
