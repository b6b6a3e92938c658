"""
Registration, login and logout
"""

from fastapi import APIRouter, Depends, Request, Response, status

from ..auth.dependencies import (
    Principal,
    get_current_principal,
    get_session_id,
    get_session_store,
)
from ..auth.sessions import SESSION_KEY_PREFIX, SessionStore, end_session, start_session
from ..core.logging import get_logger
from ..repository import Repository, get_repository
from ..schemas.user import UserLogin, UserRegister, UserResponse
from ..services import users as user_service

router = APIRouter()

logger = get_logger(__name__)


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    command: UserRegister,
    response: Response,
    repository: Repository = Depends(get_repository),
    session_store: SessionStore = Depends(get_session_store),
):
    """Create an account and sign the new user in"""
    user = user_service.register_user(repository, command)
    start_session(session_store, response, user.id)
    return UserResponse.model_validate(user)


@router.post("/login", response_model=UserResponse)
def login(
    credentials: UserLogin,
    request: Request,
    response: Response,
    repository: Repository = Depends(get_repository),
    session_store: SessionStore = Depends(get_session_store),
):
    user = user_service.authenticate(repository, credentials.username, credentials.password)

    # A fresh session id on every login
    previous = get_session_id(request)
    if previous:
        session_store.delete(f"{SESSION_KEY_PREFIX}{previous}")
    start_session(session_store, response, user.id)

    logger.info(f"User {user.id} logged in")
    return UserResponse.model_validate(user)


@router.post("/logout")
def logout(
    request: Request,
    response: Response,
    session_store: SessionStore = Depends(get_session_store),
):
    session_id = get_session_id(request)
    if session_id:
        logger.info("Session ended by logout")
    end_session(session_store, response, session_id)
    return {"message": "Logged out successfully"}


@router.get("/user", response_model=UserResponse)
def get_me(
    principal: Principal = Depends(get_current_principal),
    repository: Repository = Depends(get_repository),
):
    """Currently authenticated user"""
    return UserResponse.model_validate(user_service.get_user_or_404(repository, principal.user_id))
