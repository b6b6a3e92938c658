"""
Server-side session storage.

The browser only ever holds an opaque random session id in a cookie; the
mapping from session id to user id lives here.
"""

import secrets
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from fastapi import Response

from ..config import settings
from ..core.logging import get_logger

logger = get_logger(__name__)

SESSION_KEY_PREFIX = "session:"


class SessionStore(ABC):
    """Key/value store with optional per-key expiry"""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> bool:
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """True if the key existed"""
        pass

    @abstractmethod
    def close(self) -> None:
        pass


@dataclass
class MemoryEntry:
    value: str
    expires_at: Optional[datetime] = None

    @property
    def is_expired(self) -> bool:
        if self.expires_at is None:
            return False
        return datetime.now(timezone.utc) >= self.expires_at


class MemorySessionStore(SessionStore):
    """
    In-process session store.

    Expired entries are dropped when touched and by ``cleanup_expired``.
    Only suitable for a single server process.
    """

    def __init__(self):
        self._data: Dict[str, MemoryEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            if entry.is_expired:
                del self._data[key]
                return None
            return entry.value

    def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> bool:
        with self._lock:
            expires_at = None
            if ttl_seconds is not None:
                expires_at = datetime.now(timezone.utc) + timedelta(seconds=ttl_seconds)
            self._data[key] = MemoryEntry(value=value, expires_at=expires_at)
            return True

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def cleanup_expired(self) -> int:
        with self._lock:
            expired_keys = [k for k, v in self._data.items() if v.is_expired]
            for key in expired_keys:
                del self._data[key]
        if expired_keys:
            logger.debug(f"Cleaned up {len(expired_keys)} expired sessions")
        return len(expired_keys)

    def close(self) -> None:
        with self._lock:
            self._data.clear()
        logger.info("MemorySessionStore closed")


def start_session(store: SessionStore, response: Response, user_id: int) -> str:
    """Create a session for ``user_id`` and set the session cookie on ``response``"""
    session_id = secrets.token_urlsafe(32)
    store.set(
        f"{SESSION_KEY_PREFIX}{session_id}",
        str(user_id),
        ttl_seconds=settings.session_max_age_seconds,
    )
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session_id,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    return session_id


def end_session(store: SessionStore, response: Response, session_id: Optional[str]) -> None:
    if session_id:
        store.delete(f"{SESSION_KEY_PREFIX}{session_id}")
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
