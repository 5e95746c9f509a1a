"""Messenger queries shared by the conversation endpoints."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from ..dependencies import TenantQuery
from ..models.conversation import Conversation, ConversationSummary, Message
from ..models.customer import Customer


RECENT_CONVERSATION_LIMIT = 10
NO_SUMMARY = "No summary available"


def matches_intent(message: Message, keyword: str) -> bool:
    """A message concerns ``keyword`` when its intent label or its text mentions it.

    Example:
        intent "order_status" or text "Where is my ORDER?" both match "order"
    """
    if message.message_intend and keyword in message.message_intend:
        return True
    return keyword in (message.message or "").lower()


def filter_by_intent(messages: List[Message], keyword: str) -> List[Message]:
    return [m for m in messages if matches_intent(m, keyword)]


def conversation_messages(db: Session, conversation_id: UUID, company_id: UUID) -> List[Message]:
    return (
        TenantQuery.scoped_query(db, Message, company_id)
        .filter(Message.conversation_id == conversation_id)
        .order_by(Message.time.asc())
        .all()
    )


def latest_summary_text(db: Session, conversation_id: UUID, company_id: UUID) -> str:
    summary = (
        TenantQuery.scoped_query(db, ConversationSummary, company_id)
        .filter(ConversationSummary.conversation_id == conversation_id)
        .order_by(ConversationSummary.generated_at.desc())
        .first()
    )
    return summary.summary_text if summary else NO_SUMMARY


def find_company_customer(db: Session, company_id: UUID, customer_id: str) -> Optional[Customer]:
    """Customer row for a conversation's customer_id, if it names one of the company's customers.

    customer_id is free text (channel ids such as a WhatsApp number are allowed),
    so non-UUID values simply return None.
    """
    try:
        customer_uuid = UUID(customer_id)
    except ValueError:
        return None
    return TenantQuery.scoped_query(db, Customer, company_id).filter(Customer.id == customer_uuid).first()


def recent_conversations(db: Session, customer_id: str, company_id: UUID) -> List[Conversation]:
    return (
        TenantQuery.scoped_query(db, Conversation, company_id)
        .filter(Conversation.customer_id == customer_id)
        .order_by(Conversation.starting_time.desc())
        .limit(RECENT_CONVERSATION_LIMIT)
        .all()
    )
