"""
Chat schemas for request/response validation
"""

from pydantic import Field
from typing import List, Optional
from datetime import datetime
from .base import CamelModel
from .user import UserSummary


class MessageCreate(CamelModel):
    sender_id: int
    receiver_id: int
    content: str = Field(..., min_length=1, max_length=5000)


class MessageResponse(CamelModel):
    id: int
    sender_id: int
    receiver_id: int
    content: str
    read: bool
    created_at: datetime


class ConversationResponse(CamelModel):
    user: Optional[UserSummary] = None
    messages: List[MessageResponse]
    unread_count: int = 0


class UnreadCountResponse(CamelModel):
    count: int


class MarkReadResponse(CamelModel):
    success: bool
