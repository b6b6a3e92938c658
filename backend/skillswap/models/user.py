"""
User model
"""

from sqlalchemy import Column, String, Text, Boolean, Index, func
from sqlalchemy.orm import relationship
from .base import BaseModel


class User(BaseModel):
    __tablename__ = "users"

    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    password = Column(String(255), nullable=False)  # scrypt hash, never the raw password
    bio = Column(Text, nullable=True)
    profile_image = Column(Text, nullable=True)
    is_admin = Column(Boolean, default=False, nullable=False)

    # Deleting a user removes their listings
    skills = relationship("Skill", back_populates="owner", cascade="all, delete-orphan")

    # Identity is case-insensitive: ALICE and alice are the same account
    __table_args__ = (
        Index("uq_users_username_lower", func.lower(username), unique=True),
        Index("uq_users_email_lower", func.lower(email), unique=True),
    )
