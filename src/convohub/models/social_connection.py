"""SocialConnection SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from .base import Base, utcnow


def _generate_connection_id() -> str:
    return str(uuid4())


class SocialConnection(Base):
    """An access token for a third-party platform account or page.

    The id is the platform's own identifier (e.g. the Facebook page id) when
    known, so re-running the OAuth flow updates rows in place. The same page
    may be connected by several companies, hence the composite key.
    """
    __tablename__ = "social_connection"

    id = Column(String(255), primary_key=True, default=_generate_connection_id)
    company_id = Column(Uuid, ForeignKey("company.id", ondelete="CASCADE"), primary_key=True)
    platform_name = Column(String(100), nullable=False)
    platform_type = Column(String(100), nullable=False)
    platform_token = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    company = relationship("Company", back_populates="social_connections")

    @property
    def masked_token(self) -> str:
        """First 8 characters of the token followed by a mask."""
        return f"{self.platform_token[:8]}****"
