"""
Exchange routes: requests, status changes, scheduling and dashboard stats
"""

from fastapi import APIRouter, Depends, status
from typing import List

from ..auth.dependencies import Principal, get_current_principal
from ..repository import Repository, get_repository
from ..schemas.exchange import (
    DashboardStats,
    ExchangeCreate,
    ExchangeDetailResponse,
    ExchangeNextSessionUpdate,
    ExchangeResponse,
    ExchangeStatusUpdate,
)
from ..services import exchanges as exchange_service

router = APIRouter()


@router.get("/exchanges", response_model=List[ExchangeDetailResponse])
def list_exchanges(
    principal: Principal = Depends(get_current_principal),
    repository: Repository = Depends(get_repository),
):
    """All exchanges the current user takes part in, newest first"""
    exchanges = repository.get_exchanges_by_user(principal.user_id)
    return exchange_service.exchange_details(repository, exchanges)


@router.get("/exchanges/active", response_model=List[ExchangeDetailResponse])
def list_active_exchanges(
    principal: Principal = Depends(get_current_principal),
    repository: Repository = Depends(get_repository),
):
    exchanges = repository.get_active_exchanges_by_user(principal.user_id)
    return exchange_service.exchange_details(repository, exchanges)


@router.get("/exchanges/{exchange_id}", response_model=ExchangeDetailResponse)
def get_exchange(
    exchange_id: int,
    principal: Principal = Depends(get_current_principal),
    repository: Repository = Depends(get_repository),
):
    exchange = exchange_service.get_exchange_for(repository, principal, exchange_id)
    return exchange_service.exchange_details(repository, [exchange])[0]


@router.post("/exchanges", response_model=ExchangeResponse, status_code=status.HTTP_201_CREATED)
def create_exchange(
    command: ExchangeCreate,
    principal: Principal = Depends(get_current_principal),
    repository: Repository = Depends(get_repository),
):
    exchange = exchange_service.create_exchange(repository, principal, command)
    return ExchangeResponse.model_validate(exchange)


@router.put("/exchanges/{exchange_id}/status", response_model=ExchangeResponse)
def update_exchange_status(
    exchange_id: int,
    command: ExchangeStatusUpdate,
    principal: Principal = Depends(get_current_principal),
    repository: Repository = Depends(get_repository),
):
    """
    Move an exchange along its lifecycle.

    Only the provider accepts or rejects; either participant starts and
    completes. Completed and rejected exchanges cannot change any more.
    """
    exchange = exchange_service.change_status(repository, principal, exchange_id, command.status)
    return ExchangeResponse.model_validate(exchange)


@router.put("/exchanges/{exchange_id}/next-session", response_model=ExchangeResponse)
def update_next_session(
    exchange_id: int,
    command: ExchangeNextSessionUpdate,
    principal: Principal = Depends(get_current_principal),
    repository: Repository = Depends(get_repository),
):
    exchange = exchange_service.schedule_next_session(repository, principal, exchange_id, command.next_session)
    return ExchangeResponse.model_validate(exchange)


@router.get("/stats", response_model=DashboardStats)
def get_dashboard_stats(
    principal: Principal = Depends(get_current_principal),
    repository: Repository = Depends(get_repository),
):
    return exchange_service.dashboard_stats(repository, principal.user_id)
