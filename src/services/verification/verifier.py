"""Face match verifier service."""

import logging
import time
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from src.config.constants import INVALID_INPUT_MESSAGE, VERIFICATION_ERROR_MESSAGE
from src.config.prompts import build_face_match_system_prompt, build_face_match_user_input
from src.config.settings import Settings
from src.infrastructure.llm.executor import build_image_message, run_agent_with_format
from src.infrastructure.llm.factory import (
    azure_agent_client,
    create_anthropic_agent,
    get_shared_credential,
    is_anthropic_model,
)
from src.infrastructure.logging.logger import StructuredLogger
from src.services.verification.models import (
    FaceMatchInput,
    FaceMatchInputError,
    FaceMatchResult,
    FaceMatchServiceError,
    VerificationFailure,
)
from src.utils.data_uri import parse_media_type

logger = logging.getLogger(__name__)
structured_logger = StructuredLogger(__name__)


async def run_face_match_agent(
    settings: Settings, images: list[tuple[str, str]]
) -> FaceMatchResult:
    """
    Ask the face match model whether two images show the same person.

    Makes exactly one model call.

    Args:
        settings: Application settings
        images: (data_uri, media_type) for the selfie, then the stored image

    Raises:
        FaceMatchServiceError: On any transport failure or unusable output
    """
    system_prompt = build_face_match_system_prompt()
    message = build_image_message(build_face_match_user_input(), images)
    model = settings.face_match_agent_model

    try:
        if is_anthropic_model(model):
            agent = create_anthropic_agent(
                settings=settings,
                name="FaceMatcher",
                instructions=system_prompt,
                model=model,
                max_tokens=settings.face_match_max_tokens,
                temperature=settings.face_match_temperature,
                response_format=FaceMatchResult,
            )
            return await run_agent_with_format(agent, [message], FaceMatchResult)

        credential = get_shared_credential()
        async with azure_agent_client(settings, model, credential) as client:
            agent = client.create_agent(
                name="FaceMatcher",
                instructions=system_prompt,
                max_tokens=settings.face_match_max_tokens,
                temperature=settings.face_match_temperature,
                response_format=FaceMatchResult,
            )
            return await run_agent_with_format(agent, [message], FaceMatchResult)
    except Exception as e:
        raise FaceMatchServiceError(f"Face match call to {model} failed: {e}") from e


class FaceMatchVerifier:
    """Compares a live selfie with a stored image through a multimodal model."""

    def __init__(self, settings: Settings):
        """Initialize face match verifier."""
        self.settings = settings

    def _validate(self, payload: Any) -> list[tuple[str, str]]:
        """Check the request shape and return (data_uri, media_type) pairs."""
        if isinstance(payload, FaceMatchInput):
            request = payload
        else:
            if not isinstance(payload, Mapping):
                raise FaceMatchInputError(f"Expected an object, got {type(payload).__name__}")
            try:
                request = FaceMatchInput.model_validate(dict(payload))
            except ValidationError as e:
                raise FaceMatchInputError(str(e)) from e

        accepted = {t.lower() for t in self.settings.face_match_image_types}
        images: list[tuple[str, str]] = []
        for field_name, uri in (
            ("selfieDataUri", request.selfie_data_uri),
            ("storedImageDataUri", request.stored_image_data_uri),
        ):
            media_type = parse_media_type(uri)
            if media_type is None:
                raise FaceMatchInputError(f"{field_name} is not a base64 data URI")
            if media_type not in accepted:
                raise FaceMatchInputError(f"{field_name} has unsupported media type {media_type}")
            images.append((uri, media_type))
        return images

    async def verify(self, payload: Any) -> FaceMatchResult | VerificationFailure:
        """
        Verify that a selfie and a stored image show the same person.

        Invalid input is rejected before any model call. Every other failure is
        logged in full and reported with a generic message. Nothing is retried
        or cached.

        Args:
            payload: {"selfieDataUri": ..., "storedImageDataUri": ...} or FaceMatchInput

        Returns:
            FaceMatchResult on success, VerificationFailure otherwise
        """
        try:
            images = self._validate(payload)
        except FaceMatchInputError as e:
            logger.info(f"Face match input rejected: {e}")
            return VerificationFailure(INVALID_INPUT_MESSAGE)

        start = time.perf_counter()
        try:
            result = await run_face_match_agent(self.settings, images)
        except Exception as e:
            structured_logger.log_error(
                "face_match",
                e,
                context={
                    "model": self.settings.face_match_agent_model,
                    "media_types": [media_type for _, media_type in images],
                },
            )
            return VerificationFailure(VERIFICATION_ERROR_MESSAGE)

        structured_logger.log_step(
            "face_match",
            {"is_match": result.is_match, "confidence": result.confidence},
            duration_ms=(time.perf_counter() - start) * 1000,
        )
        return result
