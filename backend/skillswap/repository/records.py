"""
Plain records returned by every repository implementation.

They are detached from any ORM session, so services can hold on to them
after the request's database session is closed.
"""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from ..enums.exchange import ExchangeStatus


class UserRecord(BaseModel):
    id: int
    username: str
    email: str
    name: str
    password: str
    bio: Optional[str] = None
    profile_image: Optional[str] = None
    is_admin: bool = False
    created_at: datetime

    class Config:
        from_attributes = True


class SkillRecord(BaseModel):
    id: int
    user_id: int
    title: str
    description: str
    category: str
    tags: List[str] = Field(default_factory=list)
    is_offering: bool
    time_availability: Optional[str] = None
    media: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class MessageRecord(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    content: str
    read: bool = False
    created_at: datetime

    class Config:
        from_attributes = True

    def partner_of(self, user_id: int) -> int:
        return self.receiver_id if self.sender_id == user_id else self.sender_id


class ExchangeRecord(BaseModel):
    id: int
    requester_id: int
    provider_id: int
    requester_skill_id: Optional[int] = None
    provider_skill_id: Optional[int] = None
    status: ExchangeStatus
    next_session: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True

    def is_participant(self, user_id: int) -> bool:
        return user_id in (self.requester_id, self.provider_id)

    def other_participant(self, user_id: int) -> int:
        return self.provider_id if user_id == self.requester_id else self.requester_id


class ReviewRecord(BaseModel):
    id: int
    exchange_id: int
    reviewer_id: int
    receiver_id: int
    rating: int
    comment: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
