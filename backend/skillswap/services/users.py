"""
Registration, login, profile edits and admin user management
"""

from typing import Dict, Iterable, Optional

from ..auth.dependencies import Principal, ensure_owner_or_admin
from ..auth.passwords import hash_password, verify_password
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from ..core.logging import get_logger
from ..repository import Repository, UserRecord
from ..schemas.user import UserRegister, UserUpdate, UserSummary

logger = get_logger(__name__)


def summarize(user: Optional[UserRecord]) -> Optional[UserSummary]:
    if user is None:
        return None
    return UserSummary(id=user.id, username=user.username, name=user.name, profile_image=user.profile_image)


def user_summaries(repository: Repository, user_ids: Iterable[int]) -> Dict[int, Optional[UserSummary]]:
    """Look each distinct user up once"""
    return {user_id: summarize(repository.get_user(user_id)) for user_id in set(user_ids)}


def register_user(repository: Repository, command: UserRegister) -> UserRecord:
    if repository.get_user_by_username(command.username):
        raise ValidationError("Username already exists")
    if repository.get_user_by_email(command.email):
        raise ValidationError("Email already exists")

    user = repository.create_user({
        "username": command.username,
        "email": command.email,
        "name": command.name,
        "password": hash_password(command.password),
        "bio": command.bio,
        "profile_image": command.profile_image,
    })
    logger.info(f"Registered user_id={user.id} username={user.username}")
    return user


def authenticate(repository: Repository, username: str, password: str) -> UserRecord:
    user = repository.get_user_by_username(username)
    if not user or not verify_password(password, user.password):
        logger.info(f"Failed login for username={username}")
        raise AuthenticationError("Invalid username or password")
    return user


def get_user_or_404(repository: Repository, user_id: int) -> UserRecord:
    user = repository.get_user(user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def update_profile(repository: Repository, principal: Principal, user_id: int, command: UserUpdate) -> UserRecord:
    user = get_user_or_404(repository, user_id)
    ensure_owner_or_admin(principal, user.id, "Not authorized to update this user")

    updates = command.model_dump(exclude_unset=True)
    for required in ("username", "email", "name", "password"):
        if required in updates and updates[required] is None:
            raise ValidationError(f"{required} cannot be empty")

    if "username" in updates and updates["username"].lower() != user.username.lower():
        if repository.get_user_by_username(updates["username"]):
            raise ValidationError("Username already exists")
    if "email" in updates and updates["email"].lower() != user.email.lower():
        if repository.get_user_by_email(updates["email"]):
            raise ValidationError("Email already exists")
    if "password" in updates:
        updates["password"] = hash_password(updates["password"])

    updated = repository.update_user(user.id, updates)
    if updated is None:
        raise NotFoundError("User not found")
    return updated


def delete_user(repository: Repository, principal: Principal, user_id: int) -> None:
    """Admin-only removal; the admin gate itself is applied by the route"""
    if user_id == principal.user_id:
        raise ValidationError("You cannot delete your own account")
    if not repository.delete_user(user_id):
        raise NotFoundError("User not found")
    logger.info(f"Admin user_id={principal.user_id} deleted user_id={user_id}")
