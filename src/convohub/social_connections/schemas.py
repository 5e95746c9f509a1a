"""Pydantic schemas for social connections

Responses never carry the raw platform token, only its masked form.
"""

from datetime import datetime
from enum import Enum
from typing import List
from uuid import UUID

from pydantic import BaseModel, Field


class PlatformType(str, Enum):
    FACEBOOK = "facebook"
    INSTAGRAM = "instagram"
    TWITTER = "twitter"
    LINKEDIN = "linkedin"
    YOUTUBE = "youtube"
    TIKTOK = "tiktok"
    WHATSAPP = "whatsapp"
    TELEGRAM = "telegram"


class SocialConnectionCreate(BaseModel):
    platform_name: str = Field(..., min_length=1, max_length=100, examples=["Facebook Business"])
    platform_type: PlatformType
    platform_token: str = Field(..., min_length=1)


class SocialConnectionResponse(BaseModel):
    id: str
    company_id: UUID
    platform_name: str
    platform_type: str
    platform_token: str = Field(..., validation_alias="masked_token")
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SocialConnectionDeleteResponse(BaseModel):
    id: str


class PlatformCount(BaseModel):
    platform_type: str
    count: int


class SocialConnectionStats(BaseModel):
    total: int
    by_platform: List[PlatformCount]


class SocialConnectionVerification(BaseModel):
    valid: bool
    message: str
