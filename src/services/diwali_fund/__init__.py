"""Diwali Fund services."""

from src.services.diwali_fund.service import DiwaliFundService

__all__ = ["DiwaliFundService"]
