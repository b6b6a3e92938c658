"""
Exchange lifecycle.

The five statuses form a strict state machine:

    pending ──> accepted ──> in_progress ──> completed
       └──────> rejected

Only the provider may accept or reject a pending exchange. Either
participant may start and complete an accepted exchange. Completed and
rejected are terminal. Admins may force any transition.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, FrozenSet, List, Optional

from ..auth.dependencies import Principal
from ..core.exceptions import AuthorizationError, InvalidTransitionError, NotFoundError, ValidationError
from ..core.logging import get_logger
from ..enums.exchange import ACTIVE_STATUSES, SCHEDULABLE_STATUSES, ExchangeStatus
from ..repository import ExchangeRecord, Repository, SkillRecord
from ..schemas.exchange import DashboardStats, ExchangeCreate, ExchangeDetailResponse
from ..schemas.skill import SkillResponse
from .users import user_summaries

logger = get_logger(__name__)

TRANSITIONS: Dict[ExchangeStatus, FrozenSet[ExchangeStatus]] = {
    ExchangeStatus.PENDING: frozenset({ExchangeStatus.ACCEPTED, ExchangeStatus.REJECTED}),
    ExchangeStatus.ACCEPTED: frozenset({ExchangeStatus.IN_PROGRESS}),
    ExchangeStatus.IN_PROGRESS: frozenset({ExchangeStatus.COMPLETED}),
    ExchangeStatus.COMPLETED: frozenset(),
    ExchangeStatus.REJECTED: frozenset(),
}


def can_transition(current: ExchangeStatus, target: ExchangeStatus) -> bool:
    return target in TRANSITIONS[current]


def check_transition(exchange: ExchangeRecord, principal: Principal, target: ExchangeStatus) -> None:
    """Raise unless ``principal`` may move ``exchange`` to ``target``"""
    if principal.is_admin:
        return
    if not exchange.is_participant(principal.user_id):
        raise AuthorizationError("Not authorized to update this exchange")
    if not can_transition(exchange.status, target):
        raise InvalidTransitionError(
            f"Cannot change exchange status from {exchange.status.value} to {target.value}"
        )
    if exchange.status == ExchangeStatus.PENDING and principal.user_id != exchange.provider_id:
        raise AuthorizationError("Only the provider can accept or reject this exchange")


def get_exchange_or_404(repository: Repository, exchange_id: int) -> ExchangeRecord:
    exchange = repository.get_exchange(exchange_id)
    if not exchange:
        raise NotFoundError("Exchange not found")
    return exchange


def get_exchange_for(repository: Repository, principal: Principal, exchange_id: int) -> ExchangeRecord:
    exchange = get_exchange_or_404(repository, exchange_id)
    if not exchange.is_participant(principal.user_id) and not principal.is_admin:
        raise AuthorizationError("Not authorized to view this exchange")
    return exchange


def _check_skill_owner(repository: Repository, skill_id: Optional[int], owner_id: int, role: str) -> None:
    if skill_id is None:
        return
    skill = repository.get_skill(skill_id)
    if not skill:
        raise NotFoundError("Skill not found")
    if skill.user_id != owner_id:
        raise ValidationError(f"The {role} skill must belong to the {role}")


def create_exchange(repository: Repository, principal: Principal, command: ExchangeCreate) -> ExchangeRecord:
    if command.requester_id != principal.user_id:
        raise ValidationError("Requester ID must match the authenticated user")
    if command.provider_id == command.requester_id:
        raise ValidationError("You cannot request an exchange with yourself")
    if not repository.get_user(command.provider_id):
        raise NotFoundError("Provider not found")

    _check_skill_owner(repository, command.provider_skill_id, command.provider_id, "provider")
    _check_skill_owner(repository, command.requester_skill_id, command.requester_id, "requester")

    exchange = repository.create_exchange({
        "requester_id": command.requester_id,
        "provider_id": command.provider_id,
        "requester_skill_id": command.requester_skill_id,
        "provider_skill_id": command.provider_skill_id,
        "status": ExchangeStatus.PENDING,
    })
    logger.info(
        f"Exchange {exchange.id} requested by user {exchange.requester_id} from user {exchange.provider_id}"
    )
    return exchange


def change_status(
    repository: Repository,
    principal: Principal,
    exchange_id: int,
    target: ExchangeStatus,
) -> ExchangeRecord:
    exchange = get_exchange_or_404(repository, exchange_id)
    check_transition(exchange, principal, target)

    updated = repository.update_exchange_status(exchange_id, target)
    if updated is None:
        raise NotFoundError("Exchange not found")

    forced = " (admin)" if principal.is_admin and not can_transition(exchange.status, target) else ""
    logger.info(
        f"Exchange {exchange_id}: {exchange.status.value} -> {target.value} by user {principal.user_id}{forced}"
    )
    return updated


def schedule_next_session(
    repository: Repository,
    principal: Principal,
    exchange_id: int,
    next_session: datetime,
) -> ExchangeRecord:
    exchange = get_exchange_or_404(repository, exchange_id)
    if not exchange.is_participant(principal.user_id) and not principal.is_admin:
        raise AuthorizationError("Not authorized to update this exchange")
    if exchange.status not in SCHEDULABLE_STATUSES:
        raise InvalidTransitionError(
            "Sessions can only be scheduled for accepted or in-progress exchanges"
        )

    updated = repository.update_exchange_next_session(exchange_id, next_session)
    if updated is None:
        raise NotFoundError("Exchange not found")
    return updated


@dataclass
class ExchangePartitions:
    pending: List[ExchangeRecord] = field(default_factory=list)
    active: List[ExchangeRecord] = field(default_factory=list)
    completed: List[ExchangeRecord] = field(default_factory=list)


def partition_exchanges(exchanges: List[ExchangeRecord]) -> ExchangePartitions:
    """Split a user's exchanges; rejected ones belong to no partition"""
    partitions = ExchangePartitions()
    for exchange in exchanges:
        if exchange.status == ExchangeStatus.PENDING:
            partitions.pending.append(exchange)
        elif exchange.status in ACTIVE_STATUSES:
            partitions.active.append(exchange)
        elif exchange.status == ExchangeStatus.COMPLETED:
            partitions.completed.append(exchange)
    return partitions


def exchange_details(repository: Repository, exchanges: List[ExchangeRecord]) -> List[ExchangeDetailResponse]:
    """Embed participant summaries and both skills"""
    users = user_summaries(
        repository,
        [e.requester_id for e in exchanges] + [e.provider_id for e in exchanges],
    )
    skill_ids = {
        skill_id
        for e in exchanges
        for skill_id in (e.requester_skill_id, e.provider_skill_id)
        if skill_id is not None
    }
    skills: Dict[int, Optional[SkillRecord]] = {skill_id: repository.get_skill(skill_id) for skill_id in skill_ids}

    def skill_response(skill_id: Optional[int]) -> Optional[SkillResponse]:
        skill = skills.get(skill_id) if skill_id is not None else None
        return SkillResponse.model_validate(skill) if skill else None

    return [
        ExchangeDetailResponse(
            **exchange.model_dump(),
            requester=users.get(exchange.requester_id),
            provider=users.get(exchange.provider_id),
            requester_skill=skill_response(exchange.requester_skill_id),
            provider_skill=skill_response(exchange.provider_skill_id),
        )
        for exchange in exchanges
    ]


def dashboard_stats(repository: Repository, user_id: int) -> DashboardStats:
    partitions = partition_exchanges(repository.get_exchanges_by_user(user_id))
    return DashboardStats(
        active_exchanges=len(partitions.active),
        completed_exchanges=len(partitions.completed),
        average_rating=repository.get_average_rating_for_user(user_id),
        unread_messages=repository.get_unread_messages_count(user_id),
    )
