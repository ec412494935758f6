"""In-memory ledger repository."""

import asyncio
import logging

from src.api.models import TransactionWithUser, User
from src.infrastructure.repository.base import flatten_transactions

logger = logging.getLogger(__name__)


class InMemoryRepository:
    """Ledger held in process memory.

    Records are copied on the way in and out so callers never share mutable
    state with the store. Read-modify-write sequences must hold ``lock``.
    """

    def __init__(self, users: list[User] | None = None) -> None:
        self.lock = asyncio.Lock()
        self._users: dict[str, User] = {}
        self._counters: dict[str, int] = {}
        for user in users or []:
            self._users[user.id] = user.model_copy(deep=True)

    async def list_users(self) -> list[User]:
        return [u.model_copy(deep=True) for u in self._users.values()]

    async def get_user(self, user_id: str) -> User | None:
        user = self._users.get(user_id)
        return user.model_copy(deep=True) if user else None

    async def list_transactions(self) -> list[TransactionWithUser]:
        return flatten_transactions(list(self._users.values()))

    async def save_user(self, user: User) -> None:
        self._users[user.id] = user.model_copy(deep=True)
        await self._persist()

    async def delete_user(self, user_id: str) -> bool:
        if self._users.pop(user_id, None) is None:
            return False
        await self._persist()
        return True

    async def allocate_id(self, prefix: str) -> str:
        taken = self._taken_ids(prefix)
        n = self._counters.get(prefix, 0)
        while True:
            n += 1
            candidate = f"{prefix}{n}"
            if candidate not in taken:
                break
        self._counters[prefix] = n
        await self._persist()
        return candidate

    def _taken_ids(self, prefix: str) -> set[str]:
        ids: set[str] = set()
        for user in self._users.values():
            ids.add(user.id)
            if user.fund:
                ids.add(user.fund.id)
            for loan in user.loans:
                ids.add(loan.id)
                ids.update(tx.id for tx in loan.transactions)
        return {i for i in ids if i.startswith(prefix)}

    async def _persist(self) -> None:
        """Hook for subclasses that keep a durable copy."""
        return None
