"""
FastAPI application for SkillSwap.

Start with: uvicorn skillswap.main:app --reload
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .auth.sessions import MemorySessionStore, SessionStore
from .config import settings
from .core.exceptions import register_exception_handlers
from .core.logging import get_logger, setup_logging
from .repository import Repository, create_repository
from .routes import admin, auth, chat, exchanges, files, reviews, skills, users

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Fill in storage not injected by the caller, clean up on shutdown."""
    setup_logging()

    if app.state.repository is None:
        app.state.repository = create_repository(settings.storage_backend)
    if app.state.repository is None:
        # Relational storage: one SqlAlchemyRepository per request
        from .database import init_db
        init_db()
        logger.info("Database tables ready")

    if app.state.session_store is None:
        app.state.session_store = MemorySessionStore()

    logger.info(f"{settings.app_name} API started (storage backend: {settings.storage_backend})")
    yield

    app.state.session_store.close()
    logger.info(f"{settings.app_name} API shutdown")


def create_app(
    repository: Optional[Repository] = None,
    session_store: Optional[SessionStore] = None,
) -> FastAPI:
    """
    Build the application.

    Injected ``repository`` and ``session_store`` are used as-is and are
    available without running the lifespan (tests pass in-memory ones).
    """
    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.repository = repository
    app.state.session_store = session_store
    app.state.media_storage = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(auth.router, prefix="/api", tags=["Authentication"])
    app.include_router(users.router, prefix="/api", tags=["Users"])
    app.include_router(skills.router, prefix="/api", tags=["Skills"])
    app.include_router(chat.router, prefix="/api", tags=["Messages"])
    app.include_router(exchanges.router, prefix="/api", tags=["Exchanges"])
    app.include_router(reviews.router, prefix="/api", tags=["Reviews"])
    app.include_router(admin.router, prefix="/api", tags=["Admin"])
    app.include_router(files.router, prefix="/api")

    @app.get("/api/health")
    def health_check():
        return {"status": "healthy", "app": settings.app_name, "version": __version__}

    return app


app = create_app()
