"""
Constants, enums, and static values.
"""

from enum import Enum


class LoanType(str, Enum):
    """Loan products offered from the vault."""

    LOAN = "Loan"
    EMI = "EMI"


class LoanStatus(str, Enum):
    """Lifecycle of a loan."""

    ACTIVE = "Active"
    PAID = "Paid"
    OVERDUE = "Overdue"


class PaymentFrequency(str, Enum):
    """Repayment cadence of a loan."""

    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    YEARLY = "Yearly"


class TransactionType(str, Enum):
    """Money movements recorded against a loan."""

    DISBURSEMENT = "Disbursement"
    REPAYMENT = "Repayment"


class RegistrationType(str, Enum):
    """Product a user was registered for."""

    LOAN = "Loan"
    DIWALI_FUND = "Diwali Fund"


class FundFrequency(str, Enum):
    """Contribution cadence of a Diwali Fund plan."""

    WEEKLY = "Weekly"
    MONTHLY = "Monthly"


class VerificationState(str, Enum):
    """Verification attempt states."""

    NOT_STARTED = "not_started"
    PENDING = "pending"
    COMPLETED = "completed"


OPEN_LOAN_STATUSES = frozenset({LoanStatus.ACTIVE, LoanStatus.OVERDUE})

INVALID_INPUT_MESSAGE = "Invalid input."
VERIFICATION_ERROR_MESSAGE = "An unexpected error occurred during verification."
