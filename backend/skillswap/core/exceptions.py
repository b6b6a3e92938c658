"""
Exception hierarchy for SkillSwap.

Services raise these; the API layer turns them into JSON error bodies
with a ``message`` field (see ``register_exception_handlers``).
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .logging import get_logger

logger = get_logger(__name__)


class SkillSwapError(Exception):
    """Base exception for all domain errors."""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SkillSwapError):
    """Malformed or inconsistent request data."""
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidTransitionError(ValidationError):
    """Exchange status move not allowed by the transition table."""
    pass


class AuthenticationError(SkillSwapError):
    """No session, or the session is invalid."""
    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(SkillSwapError):
    """Authenticated, but not permitted to do this."""
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(SkillSwapError):
    """Referenced entity does not exist."""
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(SkillSwapError):
    """Uniqueness violated (duplicate review, racing registration)."""
    status_code = status.HTTP_409_CONFLICT


class UploadTooLargeError(SkillSwapError):
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE


class StorageError(SkillSwapError):
    """Media storage is unavailable or rejected the upload."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def register_exception_handlers(app: FastAPI) -> None:
    """Attach JSON error handlers for domain, validation, HTTP and unexpected errors."""

    @app.exception_handler(SkillSwapError)
    async def handle_domain_error(request: Request, exc: SkillSwapError):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Invalid request data", "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"},
        )
