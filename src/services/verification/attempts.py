"""In-memory store of per-user verification attempts."""

import logging
from dataclasses import replace
from datetime import datetime, timezone

from fastapi import HTTPException

from src.config.constants import VerificationState
from src.services.verification.models import (
    FaceMatchResult,
    VerificationAttempt,
    VerificationFailure,
)

logger = logging.getLogger(__name__)


class VerificationAttemptStore:
    """Tracks NotStarted -> Pending -> Completed for each user.

    ``begin`` and ``complete`` never await, so on a single event loop the
    pending check and the state change cannot interleave.
    """

    def __init__(self) -> None:
        self._attempts: dict[str, VerificationAttempt] = {}

    def get(self, user_id: str) -> VerificationAttempt:
        attempt = self._attempts.get(user_id)
        return replace(attempt) if attempt else VerificationAttempt()

    def begin(self, user_id: str) -> VerificationAttempt:
        """Mark an attempt as pending. Raises 409 if one is already pending."""
        current = self._attempts.get(user_id)
        if current is not None and current.state == VerificationState.PENDING:
            raise HTTPException(
                status_code=409, detail="A verification is already in progress for this user"
            )
        attempt = VerificationAttempt(
            state=VerificationState.PENDING,
            started_at=datetime.now(timezone.utc),
        )
        self._attempts[user_id] = attempt
        return replace(attempt)

    def complete(
        self, user_id: str, outcome: FaceMatchResult | VerificationFailure
    ) -> VerificationAttempt:
        attempt = self._attempts.get(user_id) or VerificationAttempt()
        attempt.state = VerificationState.COMPLETED
        attempt.outcome = outcome
        attempt.completed_at = datetime.now(timezone.utc)
        self._attempts[user_id] = attempt
        return replace(attempt)

    def reset(self, user_id: str) -> None:
        """Forget the user's attempt. Raises 409 while it is still pending."""
        current = self._attempts.get(user_id)
        if current is not None and current.state == VerificationState.PENDING:
            raise HTTPException(
                status_code=409, detail="Cannot reset a verification that is in progress"
            )
        self._attempts.pop(user_id, None)

    def abandon(self, user_id: str) -> None:
        """Drop a pending attempt that never completed."""
        current = self._attempts.get(user_id)
        if current is not None and current.state == VerificationState.PENDING:
            logger.warning("Abandoning pending verification for user %s", user_id)
            del self._attempts[user_id]
