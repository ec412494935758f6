"""Response builders for verification endpoints."""

from typing import Any

from src.api.models import VerificationAttemptResponse
from src.services.verification.models import (
    FaceMatchResult,
    VerificationAttempt,
    VerificationFailure,
)


def build_face_match_response(outcome: FaceMatchResult | VerificationFailure) -> dict[str, Any]:
    """Wire shape: {isMatch, confidence} on success, {error} on failure."""
    return outcome.to_response()


def build_attempt_response(user_id: str, attempt: VerificationAttempt) -> dict[str, Any]:
    """Serialize a verification attempt with Pydantic validation."""
    return VerificationAttemptResponse(
        user_id=user_id,
        state=attempt.state,
        outcome=attempt.outcome_response(),
        started_at=attempt.started_at,
        completed_at=attempt.completed_at,
    ).model_dump(mode="json")
