"""Request and response schemas for the Meta endpoints"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field

from ..social_connections.schemas import SocialConnectionResponse


class LoginUrlResponse(BaseModel):
    url: str


class ConnectionsResponse(BaseModel):
    total: int
    connections: List[SocialConnectionResponse]


class TokenRefreshRequest(BaseModel):
    user_token: str = Field(..., min_length=1)


class PublishPostRequest(BaseModel):
    page_id: str = Field(..., min_length=1)
    page_token: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    link: Optional[str] = None
    published: bool = True


class SendMessageRequest(BaseModel):
    page_id: str = Field("me", min_length=1)
    page_token: str = Field(..., min_length=1)
    recipient_id: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)


class PageSubscribeRequest(BaseModel):
    page_id: str = Field(..., min_length=1)
    page_token: str = Field(..., min_length=1)


class DeletePostRequest(BaseModel):
    post_id: str = Field(..., min_length=1)
    page_token: str = Field(..., min_length=1)


class CommentReplyRequest(BaseModel):
    comment_id: str = Field(..., min_length=1)
    page_token: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)


class GraphResult(BaseModel):
    """Envelope for proxied Graph responses."""
    success: bool = True
    data: Any = None
