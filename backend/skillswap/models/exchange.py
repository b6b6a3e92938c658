"""
Exchange model: an agreement between a requester and a provider to trade skills
"""

from sqlalchemy import Column, Integer, ForeignKey, String, DateTime
from sqlalchemy.orm import relationship
from .base import BaseModel
from ..enums.exchange import ExchangeStatus


class Exchange(BaseModel):
    __tablename__ = "exchanges"

    requester_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    provider_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Skill references survive skill deletion as NULL
    requester_skill_id = Column(Integer, ForeignKey("skills.id", ondelete="SET NULL"), nullable=True)
    provider_skill_id = Column(Integer, ForeignKey("skills.id", ondelete="SET NULL"), nullable=True)

    status = Column(String(20), nullable=False, default=ExchangeStatus.PENDING.value, index=True)
    next_session = Column(DateTime(timezone=True), nullable=True)

    requester = relationship("User", foreign_keys=[requester_id])
    provider = relationship("User", foreign_keys=[provider_id])
    requester_skill = relationship("Skill", foreign_keys=[requester_skill_id])
    provider_skill = relationship("Skill", foreign_keys=[provider_skill_id])
