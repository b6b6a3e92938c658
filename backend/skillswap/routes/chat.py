"""
Chat routes for messaging between users
"""

from fastapi import APIRouter, Depends, status
from typing import List

from ..auth.dependencies import Principal, get_current_principal
from ..repository import Repository, get_repository
from ..schemas.chat import (
    ConversationResponse,
    MarkReadResponse,
    MessageCreate,
    MessageResponse,
    UnreadCountResponse,
)
from ..services import messaging

router = APIRouter()


@router.get("/messages", response_model=List[ConversationResponse])
def get_conversations(
    principal: Principal = Depends(get_current_principal),
    repository: Repository = Depends(get_repository),
):
    """Conversations of the current user, most recently active first"""
    return messaging.list_conversations(repository, principal)


@router.get("/messages/unread", response_model=UnreadCountResponse)
def get_unread_count(
    principal: Principal = Depends(get_current_principal),
    repository: Repository = Depends(get_repository),
):
    return UnreadCountResponse(count=messaging.unread_count(repository, principal))


@router.get("/messages/{user_id}", response_model=ConversationResponse)
def get_conversation(
    user_id: int,
    principal: Principal = Depends(get_current_principal),
    repository: Repository = Depends(get_repository),
):
    """Full conversation with one user, oldest message first"""
    return messaging.open_conversation(repository, principal, user_id)


@router.post("/messages", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def send_message(
    command: MessageCreate,
    principal: Principal = Depends(get_current_principal),
    repository: Repository = Depends(get_repository),
):
    return MessageResponse.model_validate(messaging.send_message(repository, principal, command))


@router.post("/messages/{message_id}/read", response_model=MarkReadResponse)
def mark_message_read(
    message_id: int,
    principal: Principal = Depends(get_current_principal),
    repository: Repository = Depends(get_repository),
):
    messaging.mark_read(repository, principal, message_id)
    return MarkReadResponse(success=True)
