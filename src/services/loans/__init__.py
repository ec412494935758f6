"""Loan services."""

from src.services.loans.service import LoanService, mark_overdue, refresh_overdue

__all__ = ["LoanService", "mark_overdue", "refresh_overdue"]
