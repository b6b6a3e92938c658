"""
Review model for ratings left after a completed exchange
"""

from sqlalchemy import CheckConstraint, Column, Integer, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import BaseModel


class Review(BaseModel):
    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("exchange_id", "reviewer_id", name="uq_reviews_exchange_reviewer"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="check_rating_range"),
    )

    exchange_id = Column(Integer, ForeignKey("exchanges.id", ondelete="CASCADE"), nullable=False, index=True)
    reviewer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)  # User giving the rating
    receiver_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)  # User being rated

    # Rating (1-5 stars)
    rating = Column(Integer, nullable=False)

    # Optional comment
    comment = Column(Text, nullable=True)

    exchange = relationship("Exchange", backref="reviews")
    reviewer = relationship("User", foreign_keys=[reviewer_id], backref="reviews_given")
    receiver = relationship("User", foreign_keys=[receiver_id], backref="reviews_received")
