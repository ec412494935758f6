"""Vault position and reporting service."""

import logging

from src.api.models import (
    DashboardResponse,
    DiwaliFundReport,
    LoanReport,
    TransactionWithUser,
    User,
    Vault,
)
from src.config.constants import OPEN_LOAN_STATUSES, TransactionType
from src.config.settings import Settings
from src.infrastructure.repository import LedgerRepository
from src.services.loans.service import refresh_overdue
from src.services.users.service import summarize_user

logger = logging.getLogger(__name__)


def compute_vault(users: list[User], initial_balance: float) -> Vault:
    """
    Derive the vault position from the ledger.

    balance = initial - disbursed principal + repayments received.
    Interest is earned only once repayments exceed the disbursed principal.
    """
    loans = [loan for user in users for loan in user.loans]
    total_loans_given = sum(loan.principal for loan in loans)
    total_repaid = sum(
        tx.amount
        for loan in loans
        for tx in loan.transactions
        if tx.type == TransactionType.REPAYMENT
    )
    interest_earned = sum(max(0.0, loan.amount_repaid - loan.principal) for loan in loans)
    return Vault(
        balance=initial_balance - total_loans_given + total_repaid,
        total_loans_given=total_loans_given,
        total_interest_earned=interest_earned,
    )


class VaultService:
    """Read-only views over the ledger: vault, transactions, dashboard, reports."""

    def __init__(self, settings: Settings, repository: LedgerRepository) -> None:
        self.settings = settings
        self.repository = repository

    async def _users(self) -> list[User]:
        await refresh_overdue(self.repository)
        return await self.repository.list_users()

    async def get_vault(self) -> Vault:
        return compute_vault(await self._users(), self.settings.vault_initial_balance)

    async def list_transactions(self) -> list[TransactionWithUser]:
        return await self.repository.list_transactions()

    async def get_dashboard(self) -> DashboardResponse:
        users = await self._users()
        return DashboardResponse(
            vault=compute_vault(users, self.settings.vault_initial_balance),
            users=[summarize_user(u) for u in users],
        )

    async def loan_report(self) -> list[LoanReport]:
        """One row per active or overdue loan, oldest first."""
        rows = [
            LoanReport(
                loan_id=loan.id,
                user_id=user.id,
                user_name=user.name,
                status=loan.status,
                start_date=loan.created_at,
                due_date=loan.due_date,
                disbursed_amount=loan.principal,
                remaining_balance=loan.remaining_balance,
            )
            for user in await self._users()
            for loan in user.loans
            if loan.status in OPEN_LOAN_STATUSES
        ]
        rows.sort(key=lambda r: r.start_date)
        return rows

    async def diwali_fund_report(self) -> list[DiwaliFundReport]:
        """One row per user enrolled in the Diwali Fund."""
        return [
            DiwaliFundReport(
                user_id=user.id,
                user_name=user.name,
                contribution_amount=user.fund.contribution,
                frequency=user.fund.frequency,
                amount_contributed=user.fund.amount_contributed,
                end_date=user.fund.end_date,
            )
            for user in await self.repository.list_users()
            if user.fund is not None
        ]
