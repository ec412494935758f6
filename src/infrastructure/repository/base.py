"""Repository interface for the lending ledger."""

import asyncio
from typing import Protocol

from src.api.models import TransactionWithUser, User


class LedgerRepository(Protocol):
    """Storage for users and everything they own (loans, transactions, fund plan).

    Users are the aggregate root: every write goes through ``save_user`` so a
    backend only has to persist whole user records.
    """

    lock: asyncio.Lock

    async def list_users(self) -> list[User]:
        """Return all users in registration order."""
        ...

    async def get_user(self, user_id: str) -> User | None:
        """Return a user or None."""
        ...

    async def list_transactions(self) -> list[TransactionWithUser]:
        """Return every transaction with its owner, newest first."""
        ...

    async def save_user(self, user: User) -> None:
        """Insert or replace a user record."""
        ...

    async def delete_user(self, user_id: str) -> bool:
        """Delete a user. Returns False when the user did not exist."""
        ...

    async def allocate_id(self, prefix: str) -> str:
        """Return a new identifier unique within ``prefix``."""
        ...


def flatten_transactions(users: list[User]) -> list[TransactionWithUser]:
    """Annotate every loan transaction with its owner and sort newest first."""
    rows = [
        TransactionWithUser(
            **tx.model_dump(),
            user_id=user.id,
            user_name=user.name,
        )
        for user in users
        for loan in user.loans
        for tx in loan.transactions
    ]
    rows.sort(key=lambda tx: tx.date, reverse=True)
    return rows
