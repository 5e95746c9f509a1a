"""Messenger endpoints: conversations, messages, tags and summaries.

Conversations are the company's chat threads with customers on any
channel. All reads and writes are scoped to the caller's company; writes
need at least the EMPLOYEE role.
"""

import logging
from typing import Annotated, List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..auth.dependencies import CurrentUser, get_current_employee
from ..database import get_db
from ..dependencies import TenantQuery
from ..models.conversation import Conversation, ConversationSummary, ConversationTag, Message
from ..models.user import User
from .schemas import (
    ConversationCreate,
    ConversationDetails,
    ConversationResponse,
    ConversationUpdate,
    MessageCreate,
    MessageResponse,
    MessageUpdate,
    OrderMessages,
    ProductMessages,
    RecentConversation,
    SummaryCreate,
    SummaryResponse,
    TagCreate,
    TagResponse,
)
from .service import (
    conversation_messages,
    filter_by_intent,
    find_company_customer,
    latest_summary_text,
    recent_conversations,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/messenger-factory", tags=["Messenger"])

Employee = Annotated[User, Depends(get_current_employee)]


def _get_conversation(db: Session, conversation_id: UUID, company_id: UUID) -> Conversation:
    return TenantQuery.get_or_404(
        db, Conversation, conversation_id, company_id,
        detail="Conversation not found", id_attr="conversation_id",
    )


@router.post("/conversations", response_model=ConversationResponse, status_code=status.HTTP_201_CREATED)
def create_conversation(
    data: ConversationCreate,
    current_user: Employee,
    db: Session = Depends(get_db),
):
    """Start a conversation.

    If customer_id is the id of one of the company's customers, that
    customer's conversation_count is incremented in the same transaction.
    """
    values = data.model_dump(exclude_none=True)
    conversation = Conversation(company_id=current_user.company_id, **values)
    db.add(conversation)

    customer = find_company_customer(db, current_user.company_id, data.customer_id)
    if customer:
        customer.conversation_count = (customer.conversation_count or 0) + 1

    db.commit()
    db.refresh(conversation)

    logger.info(
        f"Conversation started on {conversation.conversation_source}",
        extra={"company_id": str(current_user.company_id), "user_id": str(current_user.id)}
    )
    return conversation


@router.get("/conversations", response_model=List[ConversationResponse])
def list_conversations(current_user: CurrentUser, db: Session = Depends(get_db)):
    return (
        TenantQuery.scoped_query(db, Conversation, current_user.company_id)
        .order_by(Conversation.created_at.desc())
        .all()
    )


@router.get("/conversations/customer/{customer_id}", response_model=List[ConversationResponse])
def get_customer_conversations(customer_id: str, current_user: CurrentUser, db: Session = Depends(get_db)):
    conversations = (
        TenantQuery.scoped_query(db, Conversation, current_user.company_id)
        .filter(Conversation.customer_id == customer_id)
        .order_by(Conversation.created_at.desc())
        .all()
    )
    if not conversations:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No conversations found for this customer",
        )
    return conversations


@router.get("/conversations/employee/{employee_id}", response_model=List[ConversationResponse])
def get_employee_conversations(employee_id: str, current_user: CurrentUser, db: Session = Depends(get_db)):
    """Conversations assigned to one employee."""
    conversations = (
        TenantQuery.scoped_query(db, Conversation, current_user.company_id)
        .filter(Conversation.assigned_to == employee_id)
        .order_by(Conversation.created_at.desc())
        .all()
    )
    if not conversations:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No conversations found for this employee",
        )
    return conversations


@router.get("/conversations/inbox/{customer_id}/recent", response_model=List[RecentConversation])
def get_recent_conversations(customer_id: str, current_user: CurrentUser, db: Session = Depends(get_db)):
    """Up to 10 most recent conversations of a customer with their latest summary."""
    company_id = current_user.company_id
    return [
        RecentConversation(
            conversation_id=c.conversation_id,
            customer_name=c.customer_name,
            starting_time=c.starting_time,
            conversation_status=c.conversation_status,
            summary=latest_summary_text(db, c.conversation_id, company_id),
        )
        for c in recent_conversations(db, customer_id, company_id)
    ]


@router.get("/conversations/inbox/{conversation_id}/orders", response_model=OrderMessages)
def get_order_messages(conversation_id: UUID, current_user: CurrentUser, db: Session = Depends(get_db)):
    """Messages of a conversation that concern orders."""
    _get_conversation(db, conversation_id, current_user.company_id)
    messages = filter_by_intent(conversation_messages(db, conversation_id, current_user.company_id), "order")
    return OrderMessages(
        conversation_id=conversation_id,
        order_related_messages=[MessageResponse.model_validate(m) for m in messages],
        count=len(messages),
    )


@router.get("/conversations/inbox/{conversation_id}/products", response_model=ProductMessages)
def get_product_messages(conversation_id: UUID, current_user: CurrentUser, db: Session = Depends(get_db)):
    _get_conversation(db, conversation_id, current_user.company_id)
    messages = filter_by_intent(conversation_messages(db, conversation_id, current_user.company_id), "product")
    return ProductMessages(
        conversation_id=conversation_id,
        product_related_messages=[MessageResponse.model_validate(m) for m in messages],
        count=len(messages),
    )


@router.get("/conversations/inbox/{conversation_id}", response_model=ConversationDetails)
def get_conversation_details(conversation_id: UUID, current_user: CurrentUser, db: Session = Depends(get_db)):
    """Conversation with messages (oldest first), tags and summaries (newest first)."""
    company_id = current_user.company_id
    conversation = _get_conversation(db, conversation_id, company_id)

    tags = (
        TenantQuery.scoped_query(db, ConversationTag, company_id)
        .filter(ConversationTag.conversation_id == conversation_id)
        .order_by(ConversationTag.created_at.asc())
        .all()
    )
    summaries = (
        TenantQuery.scoped_query(db, ConversationSummary, company_id)
        .filter(ConversationSummary.conversation_id == conversation_id)
        .order_by(ConversationSummary.generated_at.desc())
        .all()
    )

    return ConversationDetails(
        conversation=ConversationResponse.model_validate(conversation),
        messages=[MessageResponse.model_validate(m) for m in conversation_messages(db, conversation_id, company_id)],
        tags=[TagResponse.model_validate(t) for t in tags],
        summaries=[SummaryResponse.model_validate(s) for s in summaries],
    )


@router.patch("/conversations/{conversation_id}", response_model=ConversationResponse)
def update_conversation(
    conversation_id: UUID,
    data: ConversationUpdate,
    current_user: Employee,
    db: Session = Depends(get_db),
):
    conversation = _get_conversation(db, conversation_id, current_user.company_id)

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(conversation, field, value)

    db.commit()
    db.refresh(conversation)
    return conversation


@router.post("/messages", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def create_message(
    data: MessageCreate,
    current_user: Employee,
    db: Session = Depends(get_db),
):
    """Append a message to one of the company's conversations.

    Raises:
        HTTPException 404: Conversation not found in this company
    """
    _get_conversation(db, data.conversation_id, current_user.company_id)

    values = data.model_dump(exclude_none=True)
    values["sender_type"] = data.sender_type.value
    message = Message(company_id=current_user.company_id, **values)
    db.add(message)
    db.commit()
    db.refresh(message)
    return message


@router.patch("/messages/{message_id}", response_model=MessageResponse)
def update_message(
    message_id: UUID,
    data: MessageUpdate,
    current_user: Employee,
    db: Session = Depends(get_db),
):
    """Edit a message. Changing the text marks the message as edited."""
    message = TenantQuery.get_or_404(
        db, Message, message_id, current_user.company_id,
        detail="Message not found", id_attr="message_id",
    )

    changes = data.model_dump(exclude_unset=True)
    new_text = changes.get("message")
    if new_text is not None and new_text != message.message:
        message.edit_status = True

    for field, value in changes.items():
        if value is not None:
            setattr(message, field, value)

    db.commit()
    db.refresh(message)
    return message


@router.post(
    "/conversations/{conversation_id}/tags",
    response_model=TagResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_tag(
    conversation_id: UUID,
    data: TagCreate,
    current_user: Employee,
    db: Session = Depends(get_db),
):
    _get_conversation(db, conversation_id, current_user.company_id)

    tag = ConversationTag(
        company_id=current_user.company_id,
        conversation_id=conversation_id,
        created_by=current_user.user_name,
        **data.model_dump(),
    )
    db.add(tag)
    db.commit()
    db.refresh(tag)
    return tag


@router.post(
    "/conversations/{conversation_id}/summaries",
    response_model=SummaryResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_summary(
    conversation_id: UUID,
    data: SummaryCreate,
    current_user: Employee,
    db: Session = Depends(get_db),
):
    _get_conversation(db, conversation_id, current_user.company_id)

    summary = ConversationSummary(
        company_id=current_user.company_id,
        conversation_id=conversation_id,
        **data.model_dump(),
    )
    db.add(summary)
    db.commit()
    db.refresh(summary)
    return summary
