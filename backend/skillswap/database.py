"""
Database configuration and session management
"""

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from .config import settings
from .models.base import Base
# Import all models to ensure they're registered with SQLAlchemy
from .models import user, skill, chat, exchange, review  # noqa: F401


def build_engine(database_url: Optional[str] = None):
    database_url = database_url or settings.database_url
    options = {
        "echo": settings.log_verbosity == "full",
        "pool_pre_ping": True,
    }
    if not database_url.startswith("sqlite"):
        options["pool_recycle"] = 300

    # For Cloud SQL, if host starts with /cloudsql/, use it as the Unix socket directory
    if settings.db_host.startswith('/cloudsql/') and database_url == settings.database_url:
        unix_socket_path = '/cloudsql/' + settings.db_host.split('/cloudsql/')[1]
        options["connect_args"] = {"host": unix_socket_path}

    return create_engine(database_url, **options)


engine = build_engine()

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind=None) -> None:
    """Create all tables that don't exist yet"""
    Base.metadata.create_all(bind=bind or engine)
