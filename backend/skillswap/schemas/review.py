"""
Review schemas
"""

from pydantic import Field, StrictInt
from typing import Optional
from datetime import datetime
from .base import CamelModel
from .user import UserSummary


class ReviewCreate(CamelModel):
    exchange_id: int
    reviewer_id: Optional[int] = None  # must be the caller when given
    receiver_id: Optional[int] = None  # must be the other participant when given
    rating: StrictInt  # 1-5, range checked by the review rules
    comment: Optional[str] = Field(None, max_length=2000)


class ReviewResponse(CamelModel):
    id: int
    exchange_id: int
    reviewer_id: int
    receiver_id: int
    rating: int
    comment: Optional[str] = None
    created_at: datetime


class ReviewWithReviewer(ReviewResponse):
    reviewer: Optional[UserSummary] = None


class AverageRatingResponse(CamelModel):
    average_rating: float
