"""
Exchange schemas
"""

from typing import Optional
from datetime import datetime
from .base import CamelModel
from .user import UserSummary
from .skill import SkillResponse
from ..enums.exchange import ExchangeStatus


class ExchangeCreate(CamelModel):
    requester_id: int
    provider_id: int
    requester_skill_id: Optional[int] = None
    provider_skill_id: Optional[int] = None


class ExchangeStatusUpdate(CamelModel):
    status: ExchangeStatus


class ExchangeNextSessionUpdate(CamelModel):
    next_session: datetime


class ExchangeResponse(CamelModel):
    id: int
    requester_id: int
    provider_id: int
    requester_skill_id: Optional[int] = None
    provider_skill_id: Optional[int] = None
    status: ExchangeStatus
    next_session: Optional[datetime] = None
    created_at: datetime


class ExchangeDetailResponse(ExchangeResponse):
    requester: Optional[UserSummary] = None
    provider: Optional[UserSummary] = None
    requester_skill: Optional[SkillResponse] = None
    provider_skill: Optional[SkillResponse] = None


class DashboardStats(CamelModel):
    active_exchanges: int
    completed_exchanges: int
    average_rating: float
    unread_messages: int
