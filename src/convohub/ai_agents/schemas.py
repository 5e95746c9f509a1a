"""Pydantic schemas for AI agent endpoints"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class AIAgentCreate(BaseModel):
    agent_name: str = Field(..., min_length=1, max_length=255, examples=["Ava"])
    personality: str = Field(..., min_length=1)
    general_instructions: str = Field(..., min_length=1)
    avatar: Optional[str] = Field(None, max_length=500)
    choice_when_unable: str = Field(..., min_length=1, max_length=255)
    conversation_pass_instructions: str = Field(..., min_length=1)
    auto_transfer: str = Field(..., min_length=1, max_length=50)
    transfer_connecting_message: str = Field(..., min_length=1)


class AIAgentUpdate(BaseModel):
    agent_name: Optional[str] = Field(None, min_length=1, max_length=255)
    personality: Optional[str] = Field(None, min_length=1)
    general_instructions: Optional[str] = Field(None, min_length=1)
    avatar: Optional[str] = Field(None, max_length=500)
    choice_when_unable: Optional[str] = Field(None, min_length=1, max_length=255)
    conversation_pass_instructions: Optional[str] = Field(None, min_length=1)
    auto_transfer: Optional[str] = Field(None, min_length=1, max_length=50)
    transfer_connecting_message: Optional[str] = Field(None, min_length=1)


class AIAgentResponse(BaseModel):
    id: UUID
    company_id: UUID
    agent_name: str
    personality: str
    general_instructions: str
    avatar: Optional[str] = None
    choice_when_unable: str
    conversation_pass_instructions: str
    auto_transfer: str
    transfer_connecting_message: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AIAgentCount(BaseModel):
    count: int
