"""Vault, transaction, quote and report endpoints."""

from fastapi import APIRouter, Depends

from src.api.dependencies import get_repository
from src.api.models import (
    DashboardResponse,
    DiwaliFundReport,
    LoanQuote,
    LoanReport,
    LoanRequest,
    TransactionWithUser,
    Vault,
)
from src.config.settings import Settings, get_settings
from src.infrastructure.repository import LedgerRepository
from src.services.loans import LoanService
from src.services.vault import VaultService

router = APIRouter()


@router.get("/vault", response_model=Vault, tags=["vault"])
async def get_vault(
    settings: Settings = Depends(get_settings),
    repository: LedgerRepository = Depends(get_repository),
) -> Vault:
    """Current vault balance, total lent and interest earned."""
    svc = VaultService(settings, repository)
    return await svc.get_vault()


@router.get("/dashboard", response_model=DashboardResponse, tags=["vault"])
async def get_dashboard(
    settings: Settings = Depends(get_settings),
    repository: LedgerRepository = Depends(get_repository),
) -> DashboardResponse:
    """Vault position plus one card per user."""
    svc = VaultService(settings, repository)
    return await svc.get_dashboard()


@router.get("/transactions", response_model=list[TransactionWithUser], tags=["transactions"])
async def list_transactions(
    settings: Settings = Depends(get_settings),
    repository: LedgerRepository = Depends(get_repository),
) -> list[TransactionWithUser]:
    """All disbursements and repayments, newest first."""
    svc = VaultService(settings, repository)
    return await svc.list_transactions()


@router.post("/loans/quote", response_model=LoanQuote, tags=["loans"])
async def quote_loan(
    request: LoanRequest,
    settings: Settings = Depends(get_settings),
    repository: LedgerRepository = Depends(get_repository),
) -> LoanQuote:
    """Preview interest, disbursed amount and due date for a loan."""
    svc = LoanService(settings, repository)
    return svc.quote(request)


@router.get("/reports/loans", response_model=list[LoanReport], tags=["reports"])
async def loan_report(
    settings: Settings = Depends(get_settings),
    repository: LedgerRepository = Depends(get_repository),
) -> list[LoanReport]:
    """Active and overdue loans with their remaining balance."""
    svc = VaultService(settings, repository)
    return await svc.loan_report()


@router.get("/reports/diwali-fund", response_model=list[DiwaliFundReport], tags=["reports"])
async def diwali_fund_report(
    settings: Settings = Depends(get_settings),
    repository: LedgerRepository = Depends(get_repository),
) -> list[DiwaliFundReport]:
    """Diwali Fund participants with their plan."""
    svc = VaultService(settings, repository)
    return await svc.diwali_fund_report()
