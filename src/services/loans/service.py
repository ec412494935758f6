"""Loan issuance and repayment service."""

import logging
from datetime import datetime

from fastapi import HTTPException

from src.api.models import Loan, LoanQuote, LoanRequest, Transaction, User
from src.config.constants import OPEN_LOAN_STATUSES, LoanStatus, LoanType, TransactionType
from src.config.settings import Settings
from src.infrastructure.repository import LedgerRepository, audit_log
from src.utils.dates import due_date_for, utc_now

logger = logging.getLogger(__name__)


def mark_overdue(user: User, now: datetime) -> bool:
    """Flag active loans past their due date. Returns True if anything changed."""
    changed = False
    for loan in user.loans:
        if loan.status == LoanStatus.ACTIVE and loan.due_date < now and loan.remaining_balance > 0:
            loan.status = LoanStatus.OVERDUE
            changed = True
    return changed


async def refresh_overdue(repository: LedgerRepository, now: datetime | None = None) -> int:
    """Persist overdue flags across the ledger. Returns the number of users updated."""
    now = now or utc_now()
    updated = 0
    async with repository.lock:
        for user in await repository.list_users():
            if mark_overdue(user, now):
                await repository.save_user(user)
                updated += 1
    if updated:
        logger.info("Marked overdue loans for %d users", updated)
    return updated


class LoanService:
    """Handles loan quotes, issuance and repayments."""

    def __init__(self, settings: Settings, repository: LedgerRepository) -> None:
        self.settings = settings
        self.repository = repository

    def _rate(self, loan_type: LoanType) -> float:
        if loan_type == LoanType.EMI:
            return self.settings.emi_interest_rate
        return self.settings.loan_interest_rate

    def quote(self, request: LoanRequest, now: datetime | None = None) -> LoanQuote:
        """
        Compute loan figures without writing anything.

        Interest is taken up front: the user receives ``amount - interest`` and
        repays ``amount``.
        """
        if request.amount > self.settings.max_loan_amount:
            raise HTTPException(
                status_code=400,
                detail=f"Amount cannot exceed {self.settings.max_loan_amount:,.0f}",
            )
        if request.amount % self.settings.loan_amount_step:
            raise HTTPException(
                status_code=400,
                detail=f"Amount must be a multiple of {self.settings.loan_amount_step:,.0f}",
            )

        rate = self._rate(request.loan_type)
        interest = round(request.amount * rate, 2)
        return LoanQuote(
            amount_requested=request.amount,
            loan_type=request.loan_type,
            payment_frequency=request.payment_frequency,
            interest_rate=rate,
            interest=interest,
            disbursed_amount=round(request.amount - interest, 2),
            total_owed=request.amount,
            due_date=due_date_for(now or utc_now(), request.payment_frequency),
        )

    async def _require_user(self, user_id: str) -> User:
        user = await self.repository.get_user(user_id)
        if user is None:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    async def create_loan(self, user_id: str, request: LoanRequest) -> Loan:
        """Issue a loan and record its disbursement."""
        # Imported here: vault reporting depends on this module.
        from src.services.vault.service import compute_vault

        now = utc_now()
        quote = self.quote(request, now)

        async with self.repository.lock:
            user = await self._require_user(user_id)
            vault = compute_vault(
                await self.repository.list_users(), self.settings.vault_initial_balance
            )
            if quote.disbursed_amount > vault.balance:
                raise HTTPException(
                    status_code=400,
                    detail=f"Insufficient vault balance ({vault.balance:,.2f} available)",
                )

            loan_id = await self.repository.allocate_id("loan")
            txn_id = await self.repository.allocate_id("txn")
            loan = Loan(
                id=loan_id,
                user_id=user_id,
                amount_requested=quote.amount_requested,
                interest=quote.interest,
                principal=quote.disbursed_amount,
                total_owed=quote.total_owed,
                status=LoanStatus.ACTIVE,
                loan_type=quote.loan_type,
                payment_frequency=quote.payment_frequency,
                created_at=now,
                due_date=quote.due_date,
                transactions=[
                    Transaction(
                        id=txn_id,
                        loan_id=loan_id,
                        type=TransactionType.DISBURSEMENT,
                        amount=quote.disbursed_amount,
                        date=now,
                    )
                ],
            )
            user.loans.append(loan)
            await self.repository.save_user(user)

        audit_log("CREATE", "loan", loan.id)
        logger.info(
            "Loan %s issued to %s: disbursed=%.2f owed=%.2f",
            loan.id, user_id, loan.principal, loan.total_owed,
        )
        return loan

    async def record_repayment(self, user_id: str, loan_id: str, amount: float) -> Loan:
        """
        Record a repayment against an open loan.

        Rejects amounts above the remaining balance. The loan is marked Paid
        once nothing remains.
        """
        # Loan and transaction must carry the same rounded amount.
        amount = round(amount, 2)
        if amount <= 0:
            raise HTTPException(status_code=400, detail="Repayment amount must be positive")

        async with self.repository.lock:
            user = await self._require_user(user_id)
            loan = next((l for l in user.loans if l.id == loan_id), None)
            if loan is None:
                raise HTTPException(status_code=404, detail="Loan not found")
            if loan.status not in OPEN_LOAN_STATUSES:
                raise HTTPException(status_code=400, detail=f"Loan {loan_id} is already paid")

            remaining = loan.remaining_balance
            if amount > remaining:
                raise HTTPException(
                    status_code=400,
                    detail=f"Repayment cannot exceed the remaining balance of {remaining:,.2f}",
                )

            loan.amount_repaid = round(loan.amount_repaid + amount, 2)
            if loan.remaining_balance <= 0:
                loan.status = LoanStatus.PAID
            loan.transactions.append(
                Transaction(
                    id=await self.repository.allocate_id("txn"),
                    loan_id=loan_id,
                    type=TransactionType.REPAYMENT,
                    amount=amount,
                    date=utc_now(),
                )
            )
            await self.repository.save_user(user)

        audit_log("UPDATE", "loan", loan_id)
        logger.info("Repayment of %.2f recorded for loan %s (status=%s)", amount, loan_id, loan.status.value)
        return loan
