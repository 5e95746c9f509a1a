"""Pydantic schemas for messenger endpoints"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from ..models.conversation import SenderType


class ConversationCreate(BaseModel):
    customer_id: str = Field(..., min_length=1, max_length=255)
    customer_name: str = Field(..., min_length=1, max_length=255)
    conversation_source: str = Field(..., min_length=1, max_length=100, examples=["WEB"])
    conversation_status: str = Field("active", max_length=50)
    assigned_status: bool = False
    assigned_to: Optional[str] = Field(None, max_length=255)
    group_id: Optional[str] = Field(None, max_length=255)
    starting_time: Optional[datetime] = None
    ending_time: Optional[datetime] = None


class ConversationUpdate(BaseModel):
    customer_name: Optional[str] = Field(None, min_length=1, max_length=255)
    conversation_status: Optional[str] = Field(None, max_length=50)
    assigned_status: Optional[bool] = None
    assigned_to: Optional[str] = Field(None, max_length=255)
    group_id: Optional[str] = Field(None, max_length=255)
    ending_time: Optional[datetime] = None


class ConversationResponse(BaseModel):
    conversation_id: UUID
    company_id: UUID
    customer_id: str
    customer_name: str
    conversation_source: str
    conversation_status: str
    assigned_status: bool
    assigned_to: Optional[str] = None
    group_id: Optional[str] = None
    starting_time: datetime
    ending_time: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MessageCreate(BaseModel):
    conversation_id: UUID
    sender: str = Field(..., min_length=1, max_length=255)
    sender_type: SenderType = SenderType.HUMAN
    message: str = Field(..., min_length=1)
    message_type: str = Field("text", max_length=50)
    reply_to_message_id: Optional[UUID] = None
    message_intend: Optional[str] = Field(None, max_length=255)


class MessageUpdate(BaseModel):
    message: Optional[str] = Field(None, min_length=1)
    message_type: Optional[str] = Field(None, max_length=50)
    message_intend: Optional[str] = Field(None, max_length=255)


class MessageResponse(BaseModel):
    message_id: UUID
    company_id: UUID
    conversation_id: UUID
    sender: str
    sender_type: str
    message: str
    message_type: str
    edit_status: bool
    reply_to_message_id: Optional[UUID] = None
    time: datetime
    message_intend: Optional[str] = None

    class Config:
        from_attributes = True


class TagCreate(BaseModel):
    tag_name: str = Field(..., min_length=1, max_length=100)
    tag_color: Optional[str] = Field(None, max_length=20)
    tag_description: Optional[str] = None


class TagResponse(BaseModel):
    id: UUID
    conversation_id: UUID
    tag_name: str
    tag_color: Optional[str] = None
    tag_description: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class SummaryCreate(BaseModel):
    summary_text: str = Field(..., min_length=1)
    summary_type: str = Field("auto", max_length=50)
    generated_by: Optional[str] = Field(None, max_length=255)


class SummaryResponse(BaseModel):
    id: UUID
    conversation_id: UUID
    summary_text: str
    summary_type: str
    generated_by: Optional[str] = None
    generated_at: datetime

    class Config:
        from_attributes = True


class ConversationDetails(BaseModel):
    """Inbox view of one conversation."""
    conversation: ConversationResponse
    messages: List[MessageResponse]
    tags: List[TagResponse]
    summaries: List[SummaryResponse]


class RecentConversation(BaseModel):
    conversation_id: UUID
    customer_name: str
    starting_time: datetime
    conversation_status: str
    summary: str


class OrderMessages(BaseModel):
    conversation_id: UUID
    order_related_messages: List[MessageResponse]
    count: int


class ProductMessages(BaseModel):
    conversation_id: UUID
    product_related_messages: List[MessageResponse]
    count: int
