"""Ledger repository implementations."""

import logging

from src.config.settings import Settings
from src.infrastructure.repository.base import LedgerRepository, flatten_transactions
from src.infrastructure.repository.helpers import audit_log
from src.infrastructure.repository.json_store import JsonFileRepository
from src.infrastructure.repository.memory import InMemoryRepository

logger = logging.getLogger(__name__)


def create_repository(settings: Settings) -> LedgerRepository:
    """Build the repository selected by ``settings.storage_backend``."""
    if settings.storage_backend == "json":
        logger.info("Using JSON file ledger at %s", settings.storage_path)
        return JsonFileRepository(settings.storage_path)
    logger.info("Using in-memory ledger")
    return InMemoryRepository()


__all__ = [
    "InMemoryRepository",
    "JsonFileRepository",
    "LedgerRepository",
    "audit_log",
    "create_repository",
    "flatten_transactions",
]
