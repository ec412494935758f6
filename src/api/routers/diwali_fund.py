"""Diwali Fund endpoints."""

from fastapi import APIRouter, Depends

from src.api.dependencies import get_repository
from src.api.models import (
    ContributionRequest,
    DiwaliFundPlan,
    DiwaliParticipant,
    FundPlanRequest,
    FundQuote,
    FundWithdrawal,
)
from src.config.settings import Settings, get_settings
from src.infrastructure.repository import LedgerRepository
from src.services.diwali_fund import DiwaliFundService

router = APIRouter()


@router.post("/quote", response_model=FundQuote)
async def quote_plan(
    request: FundPlanRequest,
    settings: Settings = Depends(get_settings),
    repository: LedgerRepository = Depends(get_repository),
) -> FundQuote:
    """Preview payments and estimated return up to Diwali."""
    svc = DiwaliFundService(settings, repository)
    return svc.quote(request)


@router.get("/", response_model=list[DiwaliParticipant])
async def list_participants(
    settings: Settings = Depends(get_settings),
    repository: LedgerRepository = Depends(get_repository),
) -> list[DiwaliParticipant]:
    """List fund participants."""
    svc = DiwaliFundService(settings, repository)
    return await svc.list_participants()


@router.post("/{user_id}", response_model=DiwaliFundPlan, status_code=201)
async def join_fund(
    user_id: str,
    request: FundPlanRequest,
    settings: Settings = Depends(get_settings),
    repository: LedgerRepository = Depends(get_repository),
) -> DiwaliFundPlan:
    """Enroll a registered user in the fund."""
    svc = DiwaliFundService(settings, repository)
    return await svc.join_fund(user_id, request)


@router.post("/{user_id}/contributions", response_model=DiwaliFundPlan)
async def record_contribution(
    user_id: str,
    request: ContributionRequest,
    settings: Settings = Depends(get_settings),
    repository: LedgerRepository = Depends(get_repository),
) -> DiwaliFundPlan:
    """Record a contribution towards the user's plan."""
    svc = DiwaliFundService(settings, repository)
    return await svc.record_contribution(user_id, request.amount)


@router.delete("/{user_id}", response_model=FundWithdrawal)
async def remove_participant(
    user_id: str,
    settings: Settings = Depends(get_settings),
    repository: LedgerRepository = Depends(get_repository),
) -> FundWithdrawal:
    """Remove a participant and return their payout. Fund-only users without loans are deleted too."""
    svc = DiwaliFundService(settings, repository)
    return await svc.remove_participant(user_id)
