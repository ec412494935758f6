"""Face match verification."""

from src.services.verification.attempts import VerificationAttemptStore
from src.services.verification.models import (
    FaceMatchInput,
    FaceMatchInputError,
    FaceMatchResult,
    FaceMatchServiceError,
    VerificationAttempt,
    VerificationFailure,
)
from src.services.verification.service import VerificationService
from src.services.verification.verifier import FaceMatchVerifier

__all__ = [
    "FaceMatchInput",
    "FaceMatchInputError",
    "FaceMatchResult",
    "FaceMatchServiceError",
    "FaceMatchVerifier",
    "VerificationAttempt",
    "VerificationAttemptStore",
    "VerificationFailure",
    "VerificationService",
]
