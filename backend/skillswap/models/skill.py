"""
Skill listing model
"""

from sqlalchemy import Column, Integer, ForeignKey, String, Text, Boolean, JSON
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import relationship
from .base import BaseModel

# Native text[] on PostgreSQL, JSON list elsewhere (SQLite in tests)
TagList = ARRAY(String).with_variant(JSON(), "sqlite")


class Skill(BaseModel):
    __tablename__ = "skills"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(100), nullable=False, index=True)
    tags = Column(TagList, nullable=False)
    is_offering = Column(Boolean, nullable=False)  # True = offering, False = seeking
    time_availability = Column(Text, nullable=True)
    media = Column(Text, nullable=True)

    owner = relationship("User", back_populates="skills")
