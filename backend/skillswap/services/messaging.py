"""
Direct messages between users.

Conversation lists are built from the flat list of a user's messages:
grouped by the other participant, each group newest-first for previews,
groups ordered by their most recent message. A single open conversation
is rendered oldest-first instead.
"""

from collections import defaultdict
from typing import Dict, List, Optional

from ..auth.dependencies import Principal
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..core.logging import detail_level, get_logger
from ..repository import MessageRecord, Repository
from ..schemas.chat import ConversationResponse, MessageCreate, MessageResponse
from ..schemas.user import UserSummary
from .users import get_user_or_404, summarize, user_summaries

logger = get_logger(__name__)


def _newest_key(message: MessageRecord) -> tuple:
    return (message.created_at, message.id)


def group_conversations(
    user_id: int,
    messages: List[MessageRecord],
    partners: Dict[int, Optional[UserSummary]],
) -> List[ConversationResponse]:
    groups: Dict[int, List[MessageRecord]] = defaultdict(list)
    for message in messages:
        groups[message.partner_of(user_id)].append(message)

    conversations = []
    for partner_id, group in groups.items():
        group.sort(key=_newest_key, reverse=True)
        conversations.append((
            _newest_key(group[0]),
            ConversationResponse(
                user=partners.get(partner_id),
                messages=[MessageResponse.model_validate(m) for m in group],
                unread_count=sum(1 for m in group if m.receiver_id == user_id and not m.read),
            ),
        ))

    conversations.sort(key=lambda pair: pair[0], reverse=True)
    return [conversation for _, conversation in conversations]


def list_conversations(repository: Repository, principal: Principal) -> List[ConversationResponse]:
    messages = repository.get_messages_by_user(principal.user_id)
    partners = user_summaries(repository, (m.partner_of(principal.user_id) for m in messages))
    return group_conversations(principal.user_id, messages, partners)


def open_conversation(repository: Repository, principal: Principal, partner_id: int) -> ConversationResponse:
    partner = get_user_or_404(repository, partner_id)
    messages = repository.get_conversation(principal.user_id, partner.id)
    return ConversationResponse(
        user=summarize(partner),
        messages=[MessageResponse.model_validate(m) for m in messages],
        unread_count=sum(1 for m in messages if m.receiver_id == principal.user_id and not m.read),
    )


def send_message(repository: Repository, principal: Principal, command: MessageCreate) -> MessageRecord:
    if command.sender_id != principal.user_id:
        raise ValidationError("Sender ID must match the authenticated user")
    if command.receiver_id == principal.user_id:
        raise ValidationError("You cannot send a message to yourself")
    if not repository.get_user(command.receiver_id):
        raise NotFoundError("Receiver not found")

    message = repository.create_message({
        "sender_id": command.sender_id,
        "receiver_id": command.receiver_id,
        "content": command.content,
    })
    logger.log(detail_level(), f"Message {message.id} sent from user {message.sender_id} to user {message.receiver_id}")
    return message


def mark_read(repository: Repository, principal: Principal, message_id: int) -> None:
    message = repository.get_message(message_id)
    if not message:
        raise NotFoundError("Message not found")
    if message.receiver_id != principal.user_id:
        raise AuthorizationError("Not authorized to mark this message as read")
    if not repository.mark_message_as_read(message_id):
        raise NotFoundError("Message not found")


def unread_count(repository: Repository, principal: Principal) -> int:
    return repository.get_unread_messages_count(principal.user_id)
