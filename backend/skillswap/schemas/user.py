"""
User schemas for request/response models
"""

from pydantic import EmailStr, Field, model_validator
from typing import Optional
from datetime import datetime
from .base import CamelModel


class UserRegister(CamelModel):
    username: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)
    confirm_password: str
    bio: Optional[str] = None
    profile_image: Optional[str] = None

    @model_validator(mode='after')
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class UserLogin(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserUpdate(CamelModel):
    username: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[EmailStr] = None
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    password: Optional[str] = Field(None, min_length=1)
    bio: Optional[str] = None
    profile_image: Optional[str] = None


class UserSummary(CamelModel):
    """Embedded owner/partner/reviewer info"""
    id: int
    username: str
    name: str
    profile_image: Optional[str] = None


class UserResponse(CamelModel):
    id: int
    username: str
    email: str
    name: str
    bio: Optional[str] = None
    profile_image: Optional[str] = None
    is_admin: bool
    created_at: datetime
