"""
Request authentication and authorization gates.

Handlers receive an explicit ``Principal`` and pass it on to the service
layer; nothing reads the session implicitly after this point.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request

from ..config import settings
from ..core.exceptions import AuthenticationError, AuthorizationError
from ..core.logging import get_logger
from ..repository import Repository, UserRecord, get_repository
from .sessions import SESSION_KEY_PREFIX, SessionStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class Principal:
    user_id: int
    username: str
    is_admin: bool = False

    @classmethod
    def from_user(cls, user: UserRecord) -> "Principal":
        return cls(user_id=user.id, username=user.username, is_admin=user.is_admin)


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_session_id(request: Request) -> Optional[str]:
    return request.cookies.get(settings.session_cookie_name)


def get_optional_principal(
    request: Request,
    repository: Repository = Depends(get_repository),
    session_store: SessionStore = Depends(get_session_store),
) -> Optional[Principal]:
    """Resolve the caller from the session cookie, or None for anonymous requests"""
    session_id = get_session_id(request)
    if not session_id:
        return None

    user_id = session_store.get(f"{SESSION_KEY_PREFIX}{session_id}")
    if not user_id:
        return None

    user = repository.get_user(int(user_id))
    if not user:
        # Session outlived its user (admin deletion): drop it
        session_store.delete(f"{SESSION_KEY_PREFIX}{session_id}")
        logger.info(f"Dropped session for deleted user_id={user_id}")
        return None

    return Principal.from_user(user)


def get_current_principal(principal: Optional[Principal] = Depends(get_optional_principal)) -> Principal:
    if principal is None:
        raise AuthenticationError("Not authenticated")
    return principal


def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.is_admin:
        raise AuthorizationError("Not authorized")
    return principal


def ensure_owner_or_admin(principal: Principal, owner_id: int, message: str) -> None:
    if principal.user_id != owner_id and not principal.is_admin:
        raise AuthorizationError(message)
