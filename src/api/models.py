"""Request/Response models for API endpoints."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, computed_field

from src.config.constants import (
    FundFrequency,
    LoanStatus,
    LoanType,
    PaymentFrequency,
    RegistrationType,
    TransactionType,
    VerificationState,
)


# ==========================================
#  LEDGER ENTITIES
# ==========================================


class Transaction(BaseModel):
    """Money movement recorded against a loan."""

    id: str
    loan_id: str
    type: TransactionType
    amount: float
    date: datetime


class Loan(BaseModel):
    """Loan or EMI issued from the vault."""

    id: str
    user_id: str
    amount_requested: float = Field(..., description="Amount the user repays in total")
    interest: float = Field(..., description="Interest deducted up front")
    principal: float = Field(..., description="Amount disbursed from the vault")
    total_owed: float
    amount_repaid: float = 0.0
    status: LoanStatus = LoanStatus.ACTIVE
    loan_type: LoanType
    payment_frequency: PaymentFrequency
    created_at: datetime
    due_date: datetime
    transactions: list[Transaction] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def remaining_balance(self) -> float:
        return max(0.0, self.total_owed - self.amount_repaid)


class DiwaliFundPlan(BaseModel):
    """Seasonal savings plan maturing at Diwali."""

    id: str
    user_id: str
    contribution: int
    frequency: FundFrequency
    number_of_payments: int
    estimated_return: float
    amount_contributed: float = 0.0
    next_payment_date: datetime
    end_date: datetime
    created_at: datetime


class User(BaseModel):
    """Registered borrower or fund participant."""

    id: str
    name: str
    contact: str
    id_proof: str
    face_image: str = Field(..., description="Registration photo as a data URI")
    registration_type: RegistrationType = RegistrationType.LOAN
    created_at: datetime
    loans: list[Loan] = []
    fund: Optional[DiwaliFundPlan] = None


# ==========================================
#  READ MODELS
# ==========================================


class TransactionWithUser(Transaction):
    """Transaction annotated with its owner."""

    user_id: str
    user_name: str


class Vault(BaseModel):
    """Lender cash position."""

    balance: float
    total_loans_given: float
    total_interest_earned: float


class UserSummary(BaseModel):
    """Dashboard card for a user."""

    id: str
    name: str
    registration_type: RegistrationType
    outstanding_balance: float = Field(..., description="Remaining balance over open loans")
    latest_loan_type: Optional[LoanType] = None
    has_fund: bool = False
    created_at: datetime


class DashboardResponse(BaseModel):
    """Vault position plus one card per user."""

    vault: Vault
    users: list[UserSummary]


class LoanReport(BaseModel):
    """Row of the open loans report."""

    loan_id: str
    user_id: str
    user_name: str
    status: LoanStatus
    start_date: datetime
    due_date: datetime
    disbursed_amount: float
    remaining_balance: float


class DiwaliFundReport(BaseModel):
    """Row of the Diwali Fund report."""

    user_id: str
    user_name: str
    contribution_amount: int
    frequency: FundFrequency
    amount_contributed: float
    end_date: datetime


class DiwaliParticipant(BaseModel):
    """Fund participant with their plan."""

    user_id: str
    user_name: str
    contact: str
    plan: DiwaliFundPlan
    remaining_contribution: float


class LoanQuote(BaseModel):
    """Loan figures computed before issuing."""

    amount_requested: float
    loan_type: LoanType
    payment_frequency: PaymentFrequency
    interest_rate: float
    interest: float
    disbursed_amount: float
    total_owed: float
    due_date: datetime


class FundQuote(BaseModel):
    """Diwali Fund plan figures computed before joining."""

    contribution: int
    frequency: FundFrequency
    number_of_payments: int
    estimated_return: float
    next_payment_date: datetime
    end_date: datetime


class FundWithdrawal(BaseModel):
    """Settlement paid out when a participant leaves the fund."""

    user_id: str
    plan_id: str
    amount_contributed: float
    early: bool = Field(..., description="Withdrawn before the Diwali date")
    deduction: float = Field(..., description="Early withdrawal penalty")
    bonus: float = Field(..., description="Bonus paid at maturity")
    payout: float


# ==========================================
#  REQUESTS
# ==========================================


class RegisterUserRequest(BaseModel):
    """Request to register a user."""

    name: str = Field(..., min_length=1, description="Full name")
    contact: str = Field(..., min_length=1, description="Phone number")
    id_proof: str = Field(..., min_length=1, description="Government ID number")
    face_image: str = Field(..., min_length=1, description="Face photo as a data URI")
    registration_type: RegistrationType = RegistrationType.LOAN


class UpdateUserRequest(BaseModel):
    """Request to update a user's personal details."""

    name: Optional[str] = Field(None, min_length=1)
    contact: Optional[str] = Field(None, min_length=1)
    id_proof: Optional[str] = Field(None, min_length=1)


class LoanRequest(BaseModel):
    """Request to quote or issue a loan."""

    amount: float = Field(..., gt=0, description="Total amount the user repays")
    loan_type: LoanType
    payment_frequency: PaymentFrequency


class RepaymentRequest(BaseModel):
    """Request to record a repayment."""

    amount: float = Field(..., gt=0)


class FundPlanRequest(BaseModel):
    """Request to quote or join a Diwali Fund plan."""

    contribution: int
    frequency: FundFrequency


class ContributionRequest(BaseModel):
    """Request to record a Diwali Fund contribution."""

    amount: float = Field(..., gt=0)


# ==========================================
#  RESPONSES
# ==========================================


class HealthResponse(BaseModel):
    """Response model for health endpoint."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Application version")


class OperationResponse(BaseModel):
    """Acknowledgement of a write."""

    status: str = "success"
    id: str


class VerificationAttemptResponse(BaseModel):
    """State of a user's verification attempt."""

    user_id: str
    state: VerificationState
    outcome: Optional[dict[str, Any]] = Field(
        None, description="{isMatch, confidence} or {error} once completed"
    )
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
