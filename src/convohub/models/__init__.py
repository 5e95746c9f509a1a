"""SQLAlchemy Models for ConvoHub"""

from .base import Base
from .associations import (
    user_departments,
    user_shifts,
    pending_user_departments,
    pending_user_shifts,
)
from .company import Company, CompanyStatus
from .user import User, UserStatus
from .pending_user import PendingUser
from .department import Department
from .shift import Shift
from .customer import Customer, CustomerSource
from .ai_agent import AIAgent
from .conversation import Conversation, Message, ConversationTag, ConversationSummary, SenderType
from .weburi_resource import WebURIResource, WebURIStatus
from .social_connection import SocialConnection
from .audit_log import AuditLog

__all__ = [
    "Base",
    "user_departments",
    "user_shifts",
    "pending_user_departments",
    "pending_user_shifts",
    "Company",
    "CompanyStatus",
    "User",
    "UserStatus",
    "PendingUser",
    "Department",
    "Shift",
    "Customer",
    "CustomerSource",
    "AIAgent",
    "Conversation",
    "Message",
    "ConversationTag",
    "ConversationSummary",
    "SenderType",
    "WebURIResource",
    "WebURIStatus",
    "SocialConnection",
    "AuditLog",
]
