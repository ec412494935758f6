"""User services."""

from src.services.users.service import UserService, summarize_user

__all__ = ["UserService", "summarize_user"]
