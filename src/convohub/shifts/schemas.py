"""Pydantic schemas for shift endpoints

Times are sent as ``HH:mm`` (24h) and returned as ``HH:MM:SS``.
"""

from datetime import datetime, time
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

SHIFT_TIME_PATTERN = r"^([01]\d|2[0-3]):([0-5]\d)$"


class ShiftCreate(BaseModel):
    shift_name: str = Field(..., min_length=1, max_length=100, examples=["Morning"])
    shift_start_time: str = Field(..., pattern=SHIFT_TIME_PATTERN, examples=["09:00"])
    shift_end_time: str = Field(..., pattern=SHIFT_TIME_PATTERN, examples=["17:00"])


class ShiftUpdate(BaseModel):
    shift_name: Optional[str] = Field(None, min_length=1, max_length=100)
    shift_start_time: Optional[str] = Field(None, pattern=SHIFT_TIME_PATTERN)
    shift_end_time: Optional[str] = Field(None, pattern=SHIFT_TIME_PATTERN)


class ShiftResponse(BaseModel):
    id: UUID
    company_id: UUID
    shift_name: str
    shift_start_time: time
    shift_end_time: time
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
