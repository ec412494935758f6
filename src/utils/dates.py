"""
Calendar arithmetic for due dates and savings plans.
"""
import calendar
from datetime import datetime, timedelta, timezone

from src.config.constants import FundFrequency, PaymentFrequency


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def add_months(value: datetime, months: int) -> datetime:
    """Add calendar months, clamping the day to the target month's length."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def due_date_for(start: datetime, frequency: PaymentFrequency) -> datetime:
    """First repayment date for a loan taken on ``start``."""
    if frequency == PaymentFrequency.DAILY:
        return start + timedelta(days=1)
    if frequency == PaymentFrequency.WEEKLY:
        return start + timedelta(days=7)
    if frequency == PaymentFrequency.MONTHLY:
        return add_months(start, 1)
    return add_months(start, 12)


def next_payment_for(start: datetime, frequency: FundFrequency) -> datetime:
    if frequency == FundFrequency.WEEKLY:
        return start + timedelta(weeks=1)
    return add_months(start, 1)


def full_weeks_between(start: datetime, end: datetime) -> int:
    return max(0, (end - start).days // 7)


def full_months_between(start: datetime, end: datetime) -> int:
    if end <= start:
        return 0
    months = (end.year - start.year) * 12 + end.month - start.month
    if add_months(start, months) > end:
        months -= 1
    return max(0, months)


def next_festival_date(now: datetime, month: int, day: int) -> datetime:
    """Midnight of the next ``month``/``day`` strictly after ``now``, in ``now``'s timezone."""
    candidate = now.replace(month=month, day=day, hour=0, minute=0, second=0, microsecond=0)
    if candidate <= now:
        candidate = candidate.replace(year=now.year + 1)
    return candidate
