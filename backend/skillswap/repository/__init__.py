"""
Storage access layer: one contract, two interchangeable implementations.
"""

from typing import Iterator, Optional

from fastapi import Request

from .base import Repository, average_rating
from .memory import InMemoryRepository
from .records import UserRecord, SkillRecord, MessageRecord, ExchangeRecord, ReviewRecord

__all__ = [
    "Repository",
    "InMemoryRepository",
    "UserRecord",
    "SkillRecord",
    "MessageRecord",
    "ExchangeRecord",
    "ReviewRecord",
    "average_rating",
    "create_repository",
    "get_repository",
]


def create_repository(backend: str) -> Optional[Repository]:
    """
    Build the long-lived repository for ``backend``.

    Returns None for "database": SQL repositories are bound to a
    request-scoped session and are created per request by ``get_repository``.
    """
    if backend == "memory":
        return InMemoryRepository()
    if backend == "database":
        return None
    raise ValueError(f"Unknown storage backend: {backend}")


def get_repository(request: Request) -> Iterator[Repository]:
    """Repository dependency for route handlers"""
    repository = getattr(request.app.state, "repository", None)
    if repository is not None:
        yield repository
        return

    from ..database import SessionLocal
    from .sql import SqlAlchemyRepository

    db = SessionLocal()
    try:
        yield SqlAlchemyRepository(db)
    finally:
        db.close()
