"""
Dictionary-backed repository for tests and local development
"""

import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from ..core.exceptions import ConflictError
from ..enums.exchange import ACTIVE_STATUSES, ExchangeStatus
from .base import Repository, average_rating
from .records import UserRecord, SkillRecord, MessageRecord, ExchangeRecord, ReviewRecord


def _utcnow() -> datetime:
    # Stored timestamps are naive UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _newest_first(record) -> tuple:
    return (record.created_at, record.id)


class InMemoryRepository(Repository):
    """
    Keeps every entity in per-instance dictionaries.

    Records handed out are deep copies, so mutating a returned record never
    changes what is stored.
    """

    def __init__(self):
        self._users: Dict[int, UserRecord] = {}
        self._skills: Dict[int, SkillRecord] = {}
        self._messages: Dict[int, MessageRecord] = {}
        self._exchanges: Dict[int, ExchangeRecord] = {}
        self._reviews: Dict[int, ReviewRecord] = {}
        self._next_ids = {"users": 1, "skills": 1, "messages": 1, "exchanges": 1, "reviews": 1}
        self._lock = threading.RLock()

    def _next_id(self, table: str) -> int:
        next_id = self._next_ids[table]
        self._next_ids[table] = next_id + 1
        return next_id

    @staticmethod
    def _copy(record):
        return record.model_copy(deep=True) if record is not None else None

    def _select(self, table: Dict[int, Any], predicate: Callable[[Any], bool]) -> List[Any]:
        with self._lock:
            return [self._copy(r) for r in table.values() if predicate(r)]

    # ---- users ----

    def get_user(self, user_id: int) -> Optional[UserRecord]:
        with self._lock:
            return self._copy(self._users.get(user_id))

    def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        wanted = username.lower()
        matches = self._select(self._users, lambda u: u.username.lower() == wanted)
        return matches[0] if matches else None

    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        wanted = email.lower()
        matches = self._select(self._users, lambda u: u.email.lower() == wanted)
        return matches[0] if matches else None

    def _check_identity_free(self, username: str, email: str, exclude_id: Optional[int] = None) -> None:
        for existing in self._users.values():
            if existing.id == exclude_id:
                continue
            if existing.username.lower() == username.lower():
                raise ConflictError("Username already exists")
            if existing.email.lower() == email.lower():
                raise ConflictError("Email already exists")

    def create_user(self, data: Dict[str, Any]) -> UserRecord:
        with self._lock:
            self._check_identity_free(data["username"], data["email"])
            user = UserRecord(
                **{**data, "is_admin": data.get("is_admin", False)},
                id=self._next_id("users"),
                created_at=_utcnow(),
            )
            self._users[user.id] = user
            return self._copy(user)

    def update_user(self, user_id: int, updates: Dict[str, Any]) -> Optional[UserRecord]:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return None
            self._check_identity_free(
                updates.get("username", user.username), updates.get("email", user.email), exclude_id=user_id
            )
            updated = user.model_copy(update=updates)
            self._users[user_id] = updated
            return self._copy(updated)

    def list_users(self) -> List[UserRecord]:
        return self._select(self._users, lambda u: True)

    def delete_user(self, user_id: int) -> bool:
        with self._lock:
            if self._users.pop(user_id, None) is None:
                return False

            owned_skills = {s.id for s in self._skills.values() if s.user_id == user_id}
            for skill_id in owned_skills:
                self._delete_skill_locked(skill_id)

            gone_exchanges = {e.id for e in self._exchanges.values() if e.is_participant(user_id)}
            for exchange_id in gone_exchanges:
                del self._exchanges[exchange_id]

            self._messages = {
                k: m for k, m in self._messages.items()
                if user_id not in (m.sender_id, m.receiver_id)
            }
            self._reviews = {
                k: r for k, r in self._reviews.items()
                if r.exchange_id not in gone_exchanges and user_id not in (r.reviewer_id, r.receiver_id)
            }
            return True

    # ---- skills ----

    def get_skill(self, skill_id: int) -> Optional[SkillRecord]:
        with self._lock:
            return self._copy(self._skills.get(skill_id))

    def get_skills_by_user(self, user_id: int) -> List[SkillRecord]:
        return self._select(self._skills, lambda s: s.user_id == user_id)

    def get_skills_by_category(self, category: str) -> List[SkillRecord]:
        wanted = category.lower()
        return self._select(self._skills, lambda s: s.category.lower() == wanted)

    def get_skills_by_tags(self, tags: List[str]) -> List[SkillRecord]:
        wanted = set(tags)
        return self._select(self._skills, lambda s: bool(wanted.intersection(s.tags)))

    def get_recent_skills(self, limit: int) -> List[SkillRecord]:
        skills = self._select(self._skills, lambda s: True)
        return sorted(skills, key=_newest_first, reverse=True)[:limit]

    def get_offering_skills(self) -> List[SkillRecord]:
        return self._select(self._skills, lambda s: s.is_offering)

    def get_requesting_skills(self) -> List[SkillRecord]:
        return self._select(self._skills, lambda s: not s.is_offering)

    def list_skills(self) -> List[SkillRecord]:
        return self._select(self._skills, lambda s: True)

    def create_skill(self, data: Dict[str, Any]) -> SkillRecord:
        with self._lock:
            skill = SkillRecord(**data, id=self._next_id("skills"), created_at=_utcnow())
            self._skills[skill.id] = skill
            return self._copy(skill)

    def update_skill(self, skill_id: int, updates: Dict[str, Any]) -> Optional[SkillRecord]:
        with self._lock:
            skill = self._skills.get(skill_id)
            if skill is None:
                return None
            updated = skill.model_copy(update=updates, deep=True)
            self._skills[skill_id] = updated
            return self._copy(updated)

    def delete_skill(self, skill_id: int) -> bool:
        with self._lock:
            return self._delete_skill_locked(skill_id)

    def _delete_skill_locked(self, skill_id: int) -> bool:
        if self._skills.pop(skill_id, None) is None:
            return False
        for exchange_id, exchange in list(self._exchanges.items()):
            updates = {}
            if exchange.requester_skill_id == skill_id:
                updates["requester_skill_id"] = None
            if exchange.provider_skill_id == skill_id:
                updates["provider_skill_id"] = None
            if updates:
                self._exchanges[exchange_id] = exchange.model_copy(update=updates)
        return True

    # ---- messages ----

    def get_message(self, message_id: int) -> Optional[MessageRecord]:
        with self._lock:
            return self._copy(self._messages.get(message_id))

    def get_messages_by_user(self, user_id: int) -> List[MessageRecord]:
        messages = self._select(self._messages, lambda m: user_id in (m.sender_id, m.receiver_id))
        return sorted(messages, key=_newest_first)

    def get_conversation(self, user_a: int, user_b: int) -> List[MessageRecord]:
        pair = {user_a, user_b}
        messages = self._select(
            self._messages,
            lambda m: {m.sender_id, m.receiver_id} == pair and m.sender_id != m.receiver_id,
        )
        return sorted(messages, key=_newest_first)

    def get_unread_messages_count(self, user_id: int) -> int:
        return len(self._select(self._messages, lambda m: m.receiver_id == user_id and not m.read))

    def create_message(self, data: Dict[str, Any]) -> MessageRecord:
        with self._lock:
            message = MessageRecord(
                **{**data, "read": False},
                id=self._next_id("messages"),
                created_at=_utcnow(),
            )
            self._messages[message.id] = message
            return self._copy(message)

    def mark_message_as_read(self, message_id: int) -> bool:
        with self._lock:
            message = self._messages.get(message_id)
            if message is None:
                return False
            self._messages[message_id] = message.model_copy(update={"read": True})
            return True

    # ---- exchanges ----

    def get_exchange(self, exchange_id: int) -> Optional[ExchangeRecord]:
        with self._lock:
            return self._copy(self._exchanges.get(exchange_id))

    def get_exchanges_by_user(self, user_id: int) -> List[ExchangeRecord]:
        exchanges = self._select(self._exchanges, lambda e: e.is_participant(user_id))
        return sorted(exchanges, key=_newest_first, reverse=True)

    def get_active_exchanges_by_user(self, user_id: int) -> List[ExchangeRecord]:
        return [e for e in self.get_exchanges_by_user(user_id) if e.status in ACTIVE_STATUSES]

    def create_exchange(self, data: Dict[str, Any]) -> ExchangeRecord:
        with self._lock:
            exchange = ExchangeRecord(
                **{"status": ExchangeStatus.PENDING, "next_session": None, **data},
                id=self._next_id("exchanges"),
                created_at=_utcnow(),
            )
            self._exchanges[exchange.id] = exchange
            return self._copy(exchange)

    def update_exchange_status(self, exchange_id: int, status: ExchangeStatus) -> Optional[ExchangeRecord]:
        return self._update_exchange(exchange_id, {"status": ExchangeStatus(status)})

    def update_exchange_next_session(self, exchange_id: int, next_session: datetime) -> Optional[ExchangeRecord]:
        return self._update_exchange(exchange_id, {"next_session": next_session})

    def _update_exchange(self, exchange_id: int, updates: Dict[str, Any]) -> Optional[ExchangeRecord]:
        with self._lock:
            exchange = self._exchanges.get(exchange_id)
            if exchange is None:
                return None
            updated = exchange.model_copy(update=updates)
            self._exchanges[exchange_id] = updated
            return self._copy(updated)

    # ---- reviews ----

    def get_review(self, review_id: int) -> Optional[ReviewRecord]:
        with self._lock:
            return self._copy(self._reviews.get(review_id))

    def get_reviews_by_user(self, user_id: int) -> List[ReviewRecord]:
        reviews = self._select(self._reviews, lambda r: r.receiver_id == user_id)
        return sorted(reviews, key=_newest_first, reverse=True)

    def get_review_for_exchange_by_reviewer(self, exchange_id: int, reviewer_id: int) -> Optional[ReviewRecord]:
        matches = self._select(
            self._reviews,
            lambda r: r.exchange_id == exchange_id and r.reviewer_id == reviewer_id,
        )
        return matches[0] if matches else None

    def create_review(self, data: Dict[str, Any]) -> ReviewRecord:
        with self._lock:
            for existing in self._reviews.values():
                if existing.exchange_id == data["exchange_id"] and existing.reviewer_id == data["reviewer_id"]:
                    raise ConflictError("You have already reviewed this exchange")
            review = ReviewRecord(**data, id=self._next_id("reviews"), created_at=_utcnow())
            self._reviews[review.id] = review
            return self._copy(review)

    def get_average_rating_for_user(self, user_id: int) -> float:
        return average_rating(r.rating for r in self.get_reviews_by_user(user_id))
