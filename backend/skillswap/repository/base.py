"""
Storage access contract shared by the in-memory and SQLAlchemy repositories.

Absence is always reported as ``None`` (or ``False`` for deletes and
read-marking); only infrastructure failures raise.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional

from ..enums.exchange import ExchangeStatus
from .records import UserRecord, SkillRecord, MessageRecord, ExchangeRecord, ReviewRecord


def average_rating(ratings: Iterable[int]) -> float:
    """Arithmetic mean rounded half-up to one decimal; 0 when there are no ratings."""
    ratings = list(ratings)
    if not ratings:
        return 0.0
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


class Repository(ABC):
    """Typed CRUD and query operations for every entity."""

    # ---- users ----

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[UserRecord]:
        pass

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        """Case-insensitive match."""
        pass

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        """Case-insensitive match."""
        pass

    @abstractmethod
    def create_user(self, data: Dict[str, Any]) -> UserRecord:
        """Persist a user; ``is_admin`` defaults to False and ``created_at`` to now."""
        pass

    @abstractmethod
    def update_user(self, user_id: int, updates: Dict[str, Any]) -> Optional[UserRecord]:
        pass

    @abstractmethod
    def list_users(self) -> List[UserRecord]:
        pass

    @abstractmethod
    def delete_user(self, user_id: int) -> bool:
        """
        Delete a user together with their skills, messages, exchanges and
        reviews. Exchanges of other users that referenced one of the deleted
        skills keep existing with the skill reference cleared.
        """
        pass

    # ---- skills ----

    @abstractmethod
    def get_skill(self, skill_id: int) -> Optional[SkillRecord]:
        pass

    @abstractmethod
    def get_skills_by_user(self, user_id: int) -> List[SkillRecord]:
        pass

    @abstractmethod
    def get_skills_by_category(self, category: str) -> List[SkillRecord]:
        """Case-insensitive exact match on category."""
        pass

    @abstractmethod
    def get_skills_by_tags(self, tags: List[str]) -> List[SkillRecord]:
        """Skills sharing at least one tag with ``tags`` (OR semantics)."""
        pass

    @abstractmethod
    def get_recent_skills(self, limit: int) -> List[SkillRecord]:
        pass

    @abstractmethod
    def get_offering_skills(self) -> List[SkillRecord]:
        pass

    @abstractmethod
    def get_requesting_skills(self) -> List[SkillRecord]:
        pass

    @abstractmethod
    def list_skills(self) -> List[SkillRecord]:
        pass

    @abstractmethod
    def create_skill(self, data: Dict[str, Any]) -> SkillRecord:
        pass

    @abstractmethod
    def update_skill(self, skill_id: int, updates: Dict[str, Any]) -> Optional[SkillRecord]:
        pass

    @abstractmethod
    def delete_skill(self, skill_id: int) -> bool:
        """Exchanges referencing the skill keep existing with the reference cleared."""
        pass

    # ---- messages ----

    @abstractmethod
    def get_message(self, message_id: int) -> Optional[MessageRecord]:
        pass

    @abstractmethod
    def get_messages_by_user(self, user_id: int) -> List[MessageRecord]:
        """Messages the user sent or received."""
        pass

    @abstractmethod
    def get_conversation(self, user_a: int, user_b: int) -> List[MessageRecord]:
        """Messages between the two users in either direction, oldest first."""
        pass

    @abstractmethod
    def get_unread_messages_count(self, user_id: int) -> int:
        pass

    @abstractmethod
    def create_message(self, data: Dict[str, Any]) -> MessageRecord:
        """Always stored unread."""
        pass

    @abstractmethod
    def mark_message_as_read(self, message_id: int) -> bool:
        """Idempotent; False only when the message does not exist."""
        pass

    # ---- exchanges ----

    @abstractmethod
    def get_exchange(self, exchange_id: int) -> Optional[ExchangeRecord]:
        pass

    @abstractmethod
    def get_exchanges_by_user(self, user_id: int) -> List[ExchangeRecord]:
        """Exchanges where the user is requester or provider, newest first."""
        pass

    @abstractmethod
    def get_active_exchanges_by_user(self, user_id: int) -> List[ExchangeRecord]:
        """Exchanges in ``ACTIVE_STATUSES`` (accepted, in_progress), newest first."""
        pass

    @abstractmethod
    def create_exchange(self, data: Dict[str, Any]) -> ExchangeRecord:
        pass

    @abstractmethod
    def update_exchange_status(self, exchange_id: int, status: ExchangeStatus) -> Optional[ExchangeRecord]:
        pass

    @abstractmethod
    def update_exchange_next_session(self, exchange_id: int, next_session: datetime) -> Optional[ExchangeRecord]:
        pass

    # ---- reviews ----

    @abstractmethod
    def get_review(self, review_id: int) -> Optional[ReviewRecord]:
        pass

    @abstractmethod
    def get_reviews_by_user(self, user_id: int) -> List[ReviewRecord]:
        """Reviews received by the user, newest first."""
        pass

    @abstractmethod
    def get_review_for_exchange_by_reviewer(self, exchange_id: int, reviewer_id: int) -> Optional[ReviewRecord]:
        pass

    @abstractmethod
    def create_review(self, data: Dict[str, Any]) -> ReviewRecord:
        pass

    @abstractmethod
    def get_average_rating_for_user(self, user_id: int) -> float:
        pass
