"""Verification service models."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from src.config.constants import VerificationState


class FaceMatchInputError(ValueError):
    """Verification input failed structural validation."""


class FaceMatchServiceError(RuntimeError):
    """The face match model call failed or returned unusable output."""


class FaceMatchInput(BaseModel):
    """Pair of images to compare, both as base64 data URIs."""

    model_config = ConfigDict(populate_by_name=True)

    selfie_data_uri: StrictStr = Field(
        ...,
        alias="selfieDataUri",
        min_length=1,
        description="Live selfie of the applicant as 'data:<mimetype>;base64,<encoded_data>'.",
    )
    stored_image_data_uri: StrictStr = Field(
        ...,
        alias="storedImageDataUri",
        min_length=1,
        description="Image stored at registration as 'data:<mimetype>;base64,<encoded_data>'.",
    )


class FaceMatchResult(BaseModel):
    """Structured output of the face match model."""

    model_config = ConfigDict(populate_by_name=True)

    is_match: bool = Field(
        ..., alias="isMatch", description="Whether the selfie matches the stored image."
    )
    confidence: float = Field(
        ..., description="The confidence level of the match (0-1)."
    )

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


@dataclass(frozen=True)
class VerificationFailure:
    """User-safe failure returned instead of a FaceMatchResult."""

    message: str

    def to_response(self) -> dict[str, Any]:
        return {"error": self.message}


@dataclass
class VerificationAttempt:
    """A user's latest verification attempt."""

    state: VerificationState = VerificationState.NOT_STARTED
    outcome: FaceMatchResult | VerificationFailure | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None

    def outcome_response(self) -> dict[str, Any] | None:
        return self.outcome.to_response() if self.outcome is not None else None
