"""Ledger repository persisted to a JSON snapshot file."""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter

from src.api.models import User
from src.infrastructure.repository.memory import InMemoryRepository

logger = logging.getLogger(__name__)

_USERS_ADAPTER = TypeAdapter(list[User])


class JsonFileRepository(InMemoryRepository):
    """In-memory ledger that rewrites a JSON snapshot after every write.

    The snapshot is a convenience for keeping data across restarts, not a
    transactional store: the in-memory state stays authoritative when a
    write to disk fails.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        users, counters = self._load()
        super().__init__(users)
        self._counters.update(counters)
        logger.info("Loaded %d users from %s", len(users), self.path)

    def _load(self) -> tuple[list[User], dict[str, int]]:
        if not self.path.exists():
            return [], {}
        raw: dict[str, Any] = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        users = _USERS_ADAPTER.validate_python(raw.get("users", []))
        counters = {str(k): int(v) for k, v in raw.get("counters", {}).items()}
        return users, counters

    def _snapshot(self) -> str:
        return json.dumps(
            {
                "users": _USERS_ADAPTER.dump_python(list(self._users.values()), mode="json"),
                "counters": self._counters,
            },
            ensure_ascii=False,
            indent=2,
        )

    def _write(self, content: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(content, encoding="utf-8")
        os.replace(tmp_path, self.path)

    async def _persist(self) -> None:
        content = self._snapshot()
        try:
            await asyncio.to_thread(self._write, content)
        except OSError as e:
            logger.error("Failed to write ledger snapshot to %s: %s", self.path, e, exc_info=True)
