"""User endpoints."""

from typing import Any

from fastapi import APIRouter, Depends

from src.api.dependencies import get_attempt_store, get_json_payload, get_repository
from src.api.models import (
    Loan,
    LoanRequest,
    OperationResponse,
    RegisterUserRequest,
    RepaymentRequest,
    UpdateUserRequest,
    User,
    UserSummary,
)
from src.api.response import build_attempt_response
from src.config.settings import Settings, get_settings
from src.infrastructure.repository import LedgerRepository
from src.services.loans import LoanService, refresh_overdue
from src.services.users import UserService
from src.services.verification import VerificationAttemptStore, VerificationService

router = APIRouter()


@router.get("/", response_model=list[UserSummary])
async def list_users(
    settings: Settings = Depends(get_settings),
    repository: LedgerRepository = Depends(get_repository),
) -> list[UserSummary]:
    """List users as dashboard cards."""
    await refresh_overdue(repository)
    svc = UserService(settings, repository)
    return await svc.list_summaries()


@router.post("/", response_model=User, status_code=201)
async def register_user(
    request: RegisterUserRequest,
    settings: Settings = Depends(get_settings),
    repository: LedgerRepository = Depends(get_repository),
) -> User:
    """Register a new user with their face photo."""
    svc = UserService(settings, repository)
    return await svc.register_user(request)


@router.get("/{user_id}", response_model=User)
async def get_user(
    user_id: str,
    settings: Settings = Depends(get_settings),
    repository: LedgerRepository = Depends(get_repository),
) -> User:
    """Get a user with their loans, transactions and fund plan."""
    await refresh_overdue(repository)
    svc = UserService(settings, repository)
    return await svc.get_user(user_id)


@router.patch("/{user_id}", response_model=User)
async def update_user(
    user_id: str,
    request: UpdateUserRequest,
    settings: Settings = Depends(get_settings),
    repository: LedgerRepository = Depends(get_repository),
) -> User:
    """Update a user's personal information."""
    svc = UserService(settings, repository)
    return await svc.update_user(user_id, request)


@router.delete("/{user_id}", response_model=OperationResponse)
async def delete_user(
    user_id: str,
    settings: Settings = Depends(get_settings),
    repository: LedgerRepository = Depends(get_repository),
) -> OperationResponse:
    """Delete a user without open loans."""
    svc = UserService(settings, repository)
    await svc.delete_user(user_id)
    return OperationResponse(id=user_id)


# ---------------------------------------------------------------------------
# Loan endpoints
# ---------------------------------------------------------------------------


@router.post("/{user_id}/loans", response_model=Loan, status_code=201)
async def create_loan(
    user_id: str,
    request: LoanRequest,
    settings: Settings = Depends(get_settings),
    repository: LedgerRepository = Depends(get_repository),
) -> Loan:
    """Issue a loan or EMI and disburse it from the vault."""
    svc = LoanService(settings, repository)
    return await svc.create_loan(user_id, request)


@router.post("/{user_id}/loans/{loan_id}/repayments", response_model=Loan)
async def record_repayment(
    user_id: str,
    loan_id: str,
    request: RepaymentRequest,
    settings: Settings = Depends(get_settings),
    repository: LedgerRepository = Depends(get_repository),
) -> Loan:
    """Record a repayment. Amounts above the remaining balance are rejected."""
    svc = LoanService(settings, repository)
    return await svc.record_repayment(user_id, loan_id, request.amount)


# ---------------------------------------------------------------------------
# Verification endpoints
# ---------------------------------------------------------------------------


@router.get("/{user_id}/verification")
async def get_verification(
    user_id: str,
    settings: Settings = Depends(get_settings),
    repository: LedgerRepository = Depends(get_repository),
    attempts: VerificationAttemptStore = Depends(get_attempt_store),
) -> dict[str, Any]:
    """Current verification attempt state for a user."""
    svc = VerificationService(settings, repository, attempts)
    attempt = await svc.get_attempt(user_id)
    return build_attempt_response(user_id, attempt)


@router.post("/{user_id}/verification")
async def verify_user(
    user_id: str,
    payload: Any = Depends(get_json_payload),
    settings: Settings = Depends(get_settings),
    repository: LedgerRepository = Depends(get_repository),
    attempts: VerificationAttemptStore = Depends(get_attempt_store),
) -> dict[str, Any]:
    """Compare a live selfie ({"selfieDataUri": ...}) with the user's stored photo."""
    svc = VerificationService(settings, repository, attempts)
    attempt = await svc.verify_user(user_id, payload)
    return build_attempt_response(user_id, attempt)


@router.delete("/{user_id}/verification", response_model=OperationResponse)
async def reset_verification(
    user_id: str,
    settings: Settings = Depends(get_settings),
    repository: LedgerRepository = Depends(get_repository),
    attempts: VerificationAttemptStore = Depends(get_attempt_store),
) -> OperationResponse:
    """Forget the user's last verification attempt."""
    svc = VerificationService(settings, repository, attempts)
    await svc.reset(user_id)
    return OperationResponse(id=user_id)
