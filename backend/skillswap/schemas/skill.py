"""
Skill schemas for request/response models
"""

from pydantic import AfterValidator, Field
from typing import Annotated, List, Optional
from datetime import datetime
from .base import CamelModel
from .user import UserSummary


def _clean_tags(tags: List[str]) -> List[str]:
    cleaned = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


Tags = Annotated[List[str], AfterValidator(_clean_tags)]


class SkillCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, max_length=100)
    tags: Tags = Field(default_factory=list)
    is_offering: bool
    time_availability: Optional[str] = None
    media: Optional[str] = None


class SkillUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    tags: Optional[Tags] = None
    is_offering: Optional[bool] = None
    time_availability: Optional[str] = None
    media: Optional[str] = None


class SkillResponse(CamelModel):
    id: int
    user_id: int
    title: str
    description: str
    category: str
    tags: List[str]
    is_offering: bool
    time_availability: Optional[str] = None
    media: Optional[str] = None
    created_at: datetime


class SkillWithOwner(SkillResponse):
    user: Optional[UserSummary] = None
