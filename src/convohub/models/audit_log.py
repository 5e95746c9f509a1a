"""AuditLog SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Index, Uuid

from .base import Base, PortableJSONB, utcnow


class AuditLog(Base):
    """AuditLog model for security event logging.

    Records security-relevant events (logins, invitations, role changes,
    deletions) for compliance and forensics. Entries are append-only and
    only removed together with their company.
    """
    __tablename__ = "audit_log"
    __table_args__ = (
        Index("ix_audit_log_company_id", "company_id"),
        Index("ix_audit_log_company_id_created_at", "company_id", "created_at"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    company_id = Column(Uuid, ForeignKey("company.id", ondelete="CASCADE"), nullable=False)
    actor_id = Column(Uuid, ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    action = Column(Text, nullable=False)
    entity_type = Column(Text, nullable=True)
    entity_id = Column(String(255), nullable=True)
    metadata_json = Column(PortableJSONB, nullable=True)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    def to_dict(self):
        """Convert audit log entry to dictionary representation"""
        return {
            "id": str(self.id),
            "company_id": str(self.company_id),
            "actor_id": str(self.actor_id) if self.actor_id else None,
            "action": self.action,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "metadata": self.metadata_json,
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
            "created_at": self.created_at.isoformat()
        }
