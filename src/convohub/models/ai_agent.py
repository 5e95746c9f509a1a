"""AIAgent SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import (
    Column, String, Text, DateTime, ForeignKey, Uuid, UniqueConstraint
)
from sqlalchemy.orm import relationship

from .base import Base, utcnow


class AIAgent(Base):
    """Configuration of an AI assistant answering customers for a company."""
    __tablename__ = "ai_agent"
    __table_args__ = (
        UniqueConstraint("company_id", "agent_name", name="uq_ai_agent_company_name"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    company_id = Column(Uuid, ForeignKey("company.id", ondelete="CASCADE"), nullable=False)
    agent_name = Column(String(255), nullable=False)
    personality = Column(Text, nullable=False)
    general_instructions = Column(Text, nullable=False)
    avatar = Column(String(500), nullable=True)
    choice_when_unable = Column(String(255), nullable=False)
    conversation_pass_instructions = Column(Text, nullable=False)
    auto_transfer = Column(String(50), nullable=False)
    transfer_connecting_message = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    company = relationship("Company", back_populates="ai_agents")
