"""Diwali Fund savings plan service."""

import logging
from datetime import datetime

from fastapi import HTTPException

from src.api.models import (
    DiwaliFundPlan,
    DiwaliParticipant,
    FundPlanRequest,
    FundQuote,
    FundWithdrawal,
    User,
)
from src.config.constants import FundFrequency, RegistrationType
from src.config.settings import Settings
from src.infrastructure.repository import LedgerRepository, audit_log
from src.utils.dates import (
    full_months_between,
    full_weeks_between,
    next_festival_date,
    next_payment_for,
    utc_now,
)

logger = logging.getLogger(__name__)


class DiwaliFundService:
    """Handles Diwali Fund quotes, enrollment and contributions."""

    def __init__(self, settings: Settings, repository: LedgerRepository) -> None:
        self.settings = settings
        self.repository = repository

    def quote(self, request: FundPlanRequest, now: datetime | None = None) -> FundQuote:
        """
        Compute the plan figures up to the next Diwali.

        estimated_return = contribution * number_of_payments * (1 + bonus rate)
        """
        if request.contribution not in self.settings.diwali_fund_contributions:
            allowed = ", ".join(str(c) for c in self.settings.diwali_fund_contributions)
            raise HTTPException(
                status_code=400, detail=f"Contribution must be one of: {allowed}"
            )

        now = now or utc_now()
        end_date = next_festival_date(now, self.settings.diwali_month, self.settings.diwali_day)
        if request.frequency == FundFrequency.WEEKLY:
            payments = full_weeks_between(now, end_date)
        else:
            payments = full_months_between(now, end_date)

        return FundQuote(
            contribution=request.contribution,
            frequency=request.frequency,
            number_of_payments=payments,
            estimated_return=round(
                request.contribution * payments * (1 + self.settings.diwali_fund_bonus_rate), 2
            ),
            next_payment_date=next_payment_for(now, request.frequency),
            end_date=end_date,
        )

    async def _require_user(self, user_id: str) -> User:
        user = await self.repository.get_user(user_id)
        if user is None:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    async def list_participants(self) -> list[DiwaliParticipant]:
        return [
            DiwaliParticipant(
                user_id=user.id,
                user_name=user.name,
                contact=user.contact,
                plan=user.fund,
                remaining_contribution=max(
                    0.0,
                    user.fund.contribution * user.fund.number_of_payments
                    - user.fund.amount_contributed,
                ),
            )
            for user in await self.repository.list_users()
            if user.fund is not None
        ]

    async def join_fund(self, user_id: str, request: FundPlanRequest) -> DiwaliFundPlan:
        """Enroll a user in the fund. One plan per user."""
        now = utc_now()
        quote = self.quote(request, now)
        if quote.number_of_payments <= 0:
            raise HTTPException(
                status_code=400,
                detail=f"No {request.frequency.value.lower()} payments left before Diwali",
            )

        async with self.repository.lock:
            user = await self._require_user(user_id)
            if user.fund is not None:
                raise HTTPException(
                    status_code=409, detail="User is already enrolled in the Diwali Fund"
                )
            user.fund = DiwaliFundPlan(
                id=await self.repository.allocate_id("fund"),
                user_id=user_id,
                contribution=quote.contribution,
                frequency=quote.frequency,
                number_of_payments=quote.number_of_payments,
                estimated_return=quote.estimated_return,
                next_payment_date=quote.next_payment_date,
                end_date=quote.end_date,
                created_at=now,
            )
            await self.repository.save_user(user)

        audit_log("CREATE", "diwali_fund", user.fund.id)
        return user.fund

    async def record_contribution(self, user_id: str, amount: float) -> DiwaliFundPlan:
        """Record a contribution and move the next payment date forward."""
        amount = round(amount, 2)
        if amount <= 0:
            raise HTTPException(status_code=400, detail="Contribution amount must be positive")

        async with self.repository.lock:
            user = await self._require_user(user_id)
            plan = user.fund
            if plan is None:
                raise HTTPException(status_code=404, detail="User is not enrolled in the Diwali Fund")
            plan.amount_contributed = round(plan.amount_contributed + amount, 2)
            plan.next_payment_date = next_payment_for(plan.next_payment_date, plan.frequency)
            await self.repository.save_user(user)

        audit_log("UPDATE", "diwali_fund", plan.id)
        return plan

    def settle(self, plan: DiwaliFundPlan, now: datetime | None = None) -> FundWithdrawal:
        """
        Compute the payout for leaving the fund.

        Before the Diwali date the contributions are returned less the early
        withdrawal rate. From the Diwali date on they are returned with the bonus.
        """
        now = now or utc_now()
        contributed = plan.amount_contributed
        early = now < plan.end_date
        deduction = round(contributed * self.settings.diwali_fund_early_withdrawal_rate, 2) if early else 0.0
        bonus = 0.0 if early else round(contributed * self.settings.diwali_fund_bonus_rate, 2)
        return FundWithdrawal(
            user_id=plan.user_id,
            plan_id=plan.id,
            amount_contributed=contributed,
            early=early,
            deduction=deduction,
            bonus=bonus,
            payout=round(contributed - deduction + bonus, 2),
        )

    async def remove_participant(self, user_id: str) -> FundWithdrawal:
        """
        Remove a user's fund plan and return the settlement owed to them.

        A user registered only for the fund and holding no loans is deleted
        along with the plan.
        """
        async with self.repository.lock:
            user = await self._require_user(user_id)
            if user.fund is None:
                raise HTTPException(status_code=404, detail="User is not enrolled in the Diwali Fund")
            settlement = self.settle(user.fund)
            if user.registration_type == RegistrationType.DIWALI_FUND and not user.loans:
                await self.repository.delete_user(user_id)
                audit_log("DELETE", "user", user_id)
            else:
                user.fund = None
                await self.repository.save_user(user)

        audit_log("DELETE", "diwali_fund", settlement.plan_id)
        logger.info(
            "Fund plan %s settled: payout=%.2f deduction=%.2f bonus=%.2f",
            settlement.plan_id, settlement.payout, settlement.deduction, settlement.bonus,
        )
        return settlement
