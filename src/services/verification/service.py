"""User identity verification service."""

import logging
from typing import Any

from fastapi import HTTPException

from src.config.constants import VerificationState
from src.config.settings import Settings
from src.infrastructure.repository import LedgerRepository
from src.services.verification.attempts import VerificationAttemptStore
from src.services.verification.models import VerificationAttempt
from src.services.verification.verifier import FaceMatchVerifier

logger = logging.getLogger(__name__)


class VerificationService:
    """Runs face match attempts against a user's registration photo."""

    def __init__(
        self,
        settings: Settings,
        repository: LedgerRepository,
        attempts: VerificationAttemptStore,
    ) -> None:
        self.settings = settings
        self.repository = repository
        self.attempts = attempts

    async def _require_user(self, user_id: str) -> None:
        if await self.repository.get_user(user_id) is None:
            raise HTTPException(status_code=404, detail="User not found")

    async def get_attempt(self, user_id: str) -> VerificationAttempt:
        await self._require_user(user_id)
        return self.attempts.get(user_id)

    async def verify_user(self, user_id: str, payload: Any) -> VerificationAttempt:
        """Compare a live selfie with the user's stored face image.

        The stored image is taken from the ledger, never from the request.
        """
        user = await self.repository.get_user(user_id)
        if user is None:
            raise HTTPException(status_code=404, detail="User not found")

        selfie = payload.get("selfieDataUri") if isinstance(payload, dict) else None
        self.attempts.begin(user_id)
        try:
            outcome = await FaceMatchVerifier(self.settings).verify(
                {"selfieDataUri": selfie, "storedImageDataUri": user.face_image}
            )
            return self.attempts.complete(user_id, outcome)
        finally:
            if self.attempts.get(user_id).state == VerificationState.PENDING:
                self.attempts.abandon(user_id)

    async def reset(self, user_id: str) -> None:
        await self._require_user(user_id)
        self.attempts.reset(user_id)
