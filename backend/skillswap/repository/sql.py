"""
SQLAlchemy-backed repository used in production
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.exceptions import ConflictError
from ..core.logging import get_logger
from ..enums.exchange import ACTIVE_STATUSES, ExchangeStatus
from ..models.user import User
from ..models.skill import Skill
from ..models.chat import Message
from ..models.exchange import Exchange
from ..models.review import Review
from .base import Repository, average_rating
from .records import UserRecord, SkillRecord, MessageRecord, ExchangeRecord, ReviewRecord

logger = get_logger(__name__)


class SqlAlchemyRepository(Repository):
    """Repository over one request-scoped SQLAlchemy session; every mutation commits."""

    def __init__(self, db: Session):
        self.db = db

    def _commit(self, conflict_message: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Integrity error: {e.orig}")
            raise ConflictError(conflict_message)

    def _add(self, instance, conflict_message: str = "Record already exists"):
        self.db.add(instance)
        self._commit(conflict_message)
        self.db.refresh(instance)
        return instance

    # ---- users ----

    def get_user(self, user_id: int) -> Optional[UserRecord]:
        user = self.db.get(User, user_id)
        return UserRecord.model_validate(user) if user else None

    def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        user = self.db.query(User).filter(func.lower(User.username) == username.lower()).first()
        return UserRecord.model_validate(user) if user else None

    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        user = self.db.query(User).filter(func.lower(User.email) == email.lower()).first()
        return UserRecord.model_validate(user) if user else None

    def create_user(self, data: Dict[str, Any]) -> UserRecord:
        user = User(**{**data, "is_admin": data.get("is_admin", False)})
        return UserRecord.model_validate(self._add(user, "Username or email already exists"))

    def update_user(self, user_id: int, updates: Dict[str, Any]) -> Optional[UserRecord]:
        user = self.db.get(User, user_id)
        if not user:
            return None
        for field, value in updates.items():
            setattr(user, field, value)
        self._commit("Username or email already exists")
        self.db.refresh(user)
        return UserRecord.model_validate(user)

    def list_users(self) -> List[UserRecord]:
        return [UserRecord.model_validate(u) for u in self.db.query(User).order_by(User.id).all()]

    def delete_user(self, user_id: int) -> bool:
        user = self.db.get(User, user_id)
        if not user:
            return False

        skill_ids = [row.id for row in self.db.query(Skill.id).filter(Skill.user_id == user_id)]
        exchange_ids = [
            row.id for row in self.db.query(Exchange.id).filter(
                or_(Exchange.requester_id == user_id, Exchange.provider_id == user_id)
            )
        ]

        # Explicit cleanup so behaviour does not depend on the dialect enforcing FKs
        self.db.query(Review).filter(
            or_(
                Review.exchange_id.in_(exchange_ids),
                Review.reviewer_id == user_id,
                Review.receiver_id == user_id,
            )
        ).delete(synchronize_session=False)
        self.db.query(Exchange).filter(Exchange.id.in_(exchange_ids)).delete(synchronize_session=False)
        self._clear_skill_references(skill_ids)
        self.db.query(Message).filter(
            or_(Message.sender_id == user_id, Message.receiver_id == user_id)
        ).delete(synchronize_session=False)

        self.db.delete(user)  # skills go with the relationship cascade
        self.db.commit()
        return True

    # ---- skills ----

    def _skills(self, query) -> List[SkillRecord]:
        return [SkillRecord.model_validate(s) for s in query.order_by(Skill.id).all()]

    def get_skill(self, skill_id: int) -> Optional[SkillRecord]:
        skill = self.db.get(Skill, skill_id)
        return SkillRecord.model_validate(skill) if skill else None

    def get_skills_by_user(self, user_id: int) -> List[SkillRecord]:
        return self._skills(self.db.query(Skill).filter(Skill.user_id == user_id))

    def get_skills_by_category(self, category: str) -> List[SkillRecord]:
        return self._skills(self.db.query(Skill).filter(func.lower(Skill.category) == category.lower()))

    def get_skills_by_tags(self, tags: List[str]) -> List[SkillRecord]:
        if not tags:
            return []
        if self.db.get_bind().dialect.name == "postgresql":
            return self._skills(self.db.query(Skill).filter(Skill.tags.overlap(list(tags))))

        # No array operators on this dialect: filter in memory
        wanted = set(tags)
        return [s for s in self._skills(self.db.query(Skill)) if wanted.intersection(s.tags)]

    def get_recent_skills(self, limit: int) -> List[SkillRecord]:
        skills = self.db.query(Skill).order_by(Skill.created_at.desc(), Skill.id.desc()).limit(limit).all()
        return [SkillRecord.model_validate(s) for s in skills]

    def get_offering_skills(self) -> List[SkillRecord]:
        return self._skills(self.db.query(Skill).filter(Skill.is_offering.is_(True)))

    def get_requesting_skills(self) -> List[SkillRecord]:
        return self._skills(self.db.query(Skill).filter(Skill.is_offering.is_(False)))

    def list_skills(self) -> List[SkillRecord]:
        return self._skills(self.db.query(Skill))

    def create_skill(self, data: Dict[str, Any]) -> SkillRecord:
        return SkillRecord.model_validate(self._add(Skill(**data)))

    def update_skill(self, skill_id: int, updates: Dict[str, Any]) -> Optional[SkillRecord]:
        skill = self.db.get(Skill, skill_id)
        if not skill:
            return None
        for field, value in updates.items():
            setattr(skill, field, value)
        self.db.commit()
        self.db.refresh(skill)
        return SkillRecord.model_validate(skill)

    def delete_skill(self, skill_id: int) -> bool:
        skill = self.db.get(Skill, skill_id)
        if not skill:
            return False
        self._clear_skill_references([skill_id])
        self.db.delete(skill)
        self.db.commit()
        return True

    def _clear_skill_references(self, skill_ids: List[int]) -> None:
        if not skill_ids:
            return
        self.db.query(Exchange).filter(Exchange.requester_skill_id.in_(skill_ids)).update(
            {Exchange.requester_skill_id: None}, synchronize_session=False
        )
        self.db.query(Exchange).filter(Exchange.provider_skill_id.in_(skill_ids)).update(
            {Exchange.provider_skill_id: None}, synchronize_session=False
        )

    # ---- messages ----

    def get_message(self, message_id: int) -> Optional[MessageRecord]:
        message = self.db.get(Message, message_id)
        return MessageRecord.model_validate(message) if message else None

    def get_messages_by_user(self, user_id: int) -> List[MessageRecord]:
        messages = self.db.query(Message).filter(
            or_(Message.sender_id == user_id, Message.receiver_id == user_id)
        ).order_by(Message.created_at.asc(), Message.id.asc()).all()
        return [MessageRecord.model_validate(m) for m in messages]

    def get_conversation(self, user_a: int, user_b: int) -> List[MessageRecord]:
        messages = self.db.query(Message).filter(
            or_(
                and_(Message.sender_id == user_a, Message.receiver_id == user_b),
                and_(Message.sender_id == user_b, Message.receiver_id == user_a),
            )
        ).order_by(Message.created_at.asc(), Message.id.asc()).all()
        return [MessageRecord.model_validate(m) for m in messages]

    def get_unread_messages_count(self, user_id: int) -> int:
        return self.db.query(Message).filter(
            Message.receiver_id == user_id,
            Message.read.is_(False),
        ).count()

    def create_message(self, data: Dict[str, Any]) -> MessageRecord:
        message = Message(**{**data, "read": False})
        return MessageRecord.model_validate(self._add(message))

    def mark_message_as_read(self, message_id: int) -> bool:
        message = self.db.get(Message, message_id)
        if not message:
            return False
        if not message.read:
            message.read = True
            self.db.commit()
        return True

    # ---- exchanges ----

    def _participant_filter(self, user_id: int):
        return or_(Exchange.requester_id == user_id, Exchange.provider_id == user_id)

    def get_exchange(self, exchange_id: int) -> Optional[ExchangeRecord]:
        exchange = self.db.get(Exchange, exchange_id)
        return ExchangeRecord.model_validate(exchange) if exchange else None

    def get_exchanges_by_user(self, user_id: int) -> List[ExchangeRecord]:
        exchanges = self.db.query(Exchange).filter(
            self._participant_filter(user_id)
        ).order_by(Exchange.created_at.desc(), Exchange.id.desc()).all()
        return [ExchangeRecord.model_validate(e) for e in exchanges]

    def get_active_exchanges_by_user(self, user_id: int) -> List[ExchangeRecord]:
        exchanges = self.db.query(Exchange).filter(
            self._participant_filter(user_id),
            Exchange.status.in_([s.value for s in ACTIVE_STATUSES]),
        ).order_by(Exchange.created_at.desc(), Exchange.id.desc()).all()
        return [ExchangeRecord.model_validate(e) for e in exchanges]

    def create_exchange(self, data: Dict[str, Any]) -> ExchangeRecord:
        values = {"status": ExchangeStatus.PENDING, "next_session": None, **data}
        values["status"] = ExchangeStatus(values["status"]).value
        return ExchangeRecord.model_validate(self._add(Exchange(**values)))

    def update_exchange_status(self, exchange_id: int, status: ExchangeStatus) -> Optional[ExchangeRecord]:
        return self._update_exchange(exchange_id, status=ExchangeStatus(status).value)

    def update_exchange_next_session(self, exchange_id: int, next_session: datetime) -> Optional[ExchangeRecord]:
        return self._update_exchange(exchange_id, next_session=next_session)

    def _update_exchange(self, exchange_id: int, **updates) -> Optional[ExchangeRecord]:
        exchange = self.db.get(Exchange, exchange_id)
        if not exchange:
            return None
        for field, value in updates.items():
            setattr(exchange, field, value)
        self.db.commit()
        self.db.refresh(exchange)
        return ExchangeRecord.model_validate(exchange)

    # ---- reviews ----

    def get_review(self, review_id: int) -> Optional[ReviewRecord]:
        review = self.db.get(Review, review_id)
        return ReviewRecord.model_validate(review) if review else None

    def get_reviews_by_user(self, user_id: int) -> List[ReviewRecord]:
        reviews = self.db.query(Review).filter(
            Review.receiver_id == user_id
        ).order_by(Review.created_at.desc(), Review.id.desc()).all()
        return [ReviewRecord.model_validate(r) for r in reviews]

    def get_review_for_exchange_by_reviewer(self, exchange_id: int, reviewer_id: int) -> Optional[ReviewRecord]:
        review = self.db.query(Review).filter(
            Review.exchange_id == exchange_id,
            Review.reviewer_id == reviewer_id,
        ).first()
        return ReviewRecord.model_validate(review) if review else None

    def create_review(self, data: Dict[str, Any]) -> ReviewRecord:
        review = self._add(Review(**data), "You have already reviewed this exchange")
        return ReviewRecord.model_validate(review)

    def get_average_rating_for_user(self, user_id: int) -> float:
        ratings = self.db.query(Review.rating).filter(Review.receiver_id == user_id).all()
        return average_rating(row.rating for row in ratings)
