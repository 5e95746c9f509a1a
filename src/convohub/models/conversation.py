"""Conversation, Message, ConversationTag and ConversationSummary models

A conversation is one thread between a customer and the company on a
given channel. Messages, tags and summaries hang off a conversation and
are removed with it.
"""

import enum
from uuid import uuid4

from sqlalchemy import (
    Boolean, Column, String, Text, DateTime, ForeignKey, Uuid, CheckConstraint, Index
)
from sqlalchemy.orm import relationship

from .base import Base, utcnow


class SenderType(str, enum.Enum):
    """Who authored a message."""
    AI_AGENT = "AI-AGENT"
    HUMAN = "HUMAN"


class Conversation(Base):
    __tablename__ = "conversation"
    __table_args__ = (
        Index("ix_conversation_company_id", "company_id"),
        Index("ix_conversation_company_customer", "company_id", "customer_id"),
    )

    conversation_id = Column(Uuid, primary_key=True, default=uuid4)
    company_id = Column(Uuid, ForeignKey("company.id", ondelete="CASCADE"), nullable=False)
    customer_id = Column(String(255), nullable=False)
    customer_name = Column(String(255), nullable=False)
    conversation_source = Column(String(100), nullable=False)
    conversation_status = Column(String(50), nullable=False, default="active")
    assigned_status = Column(Boolean, nullable=False, default=False)
    assigned_to = Column(String(255), nullable=True)
    group_id = Column(String(255), nullable=True)
    starting_time = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    ending_time = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    company = relationship("Company", back_populates="conversations")
    messages = relationship("Message", back_populates="conversation", cascade="all, delete-orphan")
    tags = relationship("ConversationTag", back_populates="conversation", cascade="all, delete-orphan")
    summaries = relationship("ConversationSummary", back_populates="conversation", cascade="all, delete-orphan")


class Message(Base):
    __tablename__ = "message"
    __table_args__ = (
        CheckConstraint("sender_type IN ('AI-AGENT', 'HUMAN')", name="ck_message_sender_type"),
        Index("ix_message_conversation_id", "conversation_id"),
    )

    message_id = Column(Uuid, primary_key=True, default=uuid4)
    company_id = Column(Uuid, ForeignKey("company.id", ondelete="CASCADE"), nullable=False)
    conversation_id = Column(
        Uuid, ForeignKey("conversation.conversation_id", ondelete="CASCADE"), nullable=False
    )
    sender = Column(String(255), nullable=False)
    sender_type = Column(Text, nullable=False, default=SenderType.HUMAN.value)
    message = Column(Text, nullable=False)
    message_type = Column(String(50), nullable=False, default="text")
    edit_status = Column(Boolean, nullable=False, default=False)
    reply_to_message_id = Column(Uuid, nullable=True)
    time = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    message_intend = Column(String(255), nullable=True)

    conversation = relationship("Conversation", back_populates="messages")


class ConversationTag(Base):
    __tablename__ = "conversation_tag"

    id = Column(Uuid, primary_key=True, default=uuid4)
    company_id = Column(Uuid, ForeignKey("company.id", ondelete="CASCADE"), nullable=False)
    conversation_id = Column(
        Uuid, ForeignKey("conversation.conversation_id", ondelete="CASCADE"), nullable=False
    )
    tag_name = Column(String(100), nullable=False)
    tag_color = Column(String(20), nullable=True)
    tag_description = Column(Text, nullable=True)
    created_by = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    conversation = relationship("Conversation", back_populates="tags")


class ConversationSummary(Base):
    __tablename__ = "conversation_summary"

    id = Column(Uuid, primary_key=True, default=uuid4)
    company_id = Column(Uuid, ForeignKey("company.id", ondelete="CASCADE"), nullable=False)
    conversation_id = Column(
        Uuid, ForeignKey("conversation.conversation_id", ondelete="CASCADE"), nullable=False
    )
    summary_text = Column(Text, nullable=False)
    summary_type = Column(String(50), nullable=False, default="auto")
    generated_by = Column(String(255), nullable=True)
    generated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    conversation = relationship("Conversation", back_populates="summaries")
