"""FastAPI dependencies."""

import json
import logging
from functools import lru_cache
from typing import Any

from fastapi import Request

from src.config.settings import Settings, get_settings
from src.infrastructure.repository import LedgerRepository, create_repository
from src.services.verification import VerificationAttemptStore

logger = logging.getLogger(__name__)


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings as a FastAPI dependency."""
    return get_settings()


@lru_cache
def get_repository() -> LedgerRepository:
    """Process-wide ledger repository, overridable in tests."""
    return create_repository(get_settings())


@lru_cache
def get_attempt_store() -> VerificationAttemptStore:
    """Process-wide verification attempt store."""
    return VerificationAttemptStore()


async def get_json_payload(request: Request) -> Any:
    """
    Raw request body decoded as JSON, or None.

    An empty or undecodable body yields None, which verification reports
    as invalid input.
    """
    body = await request.body()
    if not body:
        return None
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.info(f"Discarding undecodable request body: {e}")
        return None
