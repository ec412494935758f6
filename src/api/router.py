"""API routes."""

import logging
from typing import Any

from fastapi import APIRouter, Depends

from src.api.dependencies import get_json_payload, get_settings_dependency
from src.api.models import HealthResponse
from src.api.response import build_face_match_response
from src.config.settings import Settings
from src.services.verification import FaceMatchVerifier

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(
    settings: Settings = Depends(get_settings_dependency),  # noqa: B008
) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=settings.app_version)


# ==========================================
#  FACE MATCH ENDPOINT
# ==========================================


@router.post(
    "/verification/face-match",
    responses={
        200: {
            "description": "Match decision, or a generic error message",
            "content": {
                "application/json": {
                    "examples": {
                        "match": {"value": {"isMatch": True, "confidence": 0.92}},
                        "invalid": {"value": {"error": "Invalid input."}},
                    }
                }
            },
        }
    },
    tags=["verification"],
)
async def face_match(
    payload: Any = Depends(get_json_payload),  # noqa: B008
    settings: Settings = Depends(get_settings_dependency),  # noqa: B008
) -> dict[str, Any]:
    """
    Compare a live selfie with a stored image.

    Body: {"selfieDataUri": "data:<mime>;base64,...", "storedImageDataUri": "data:<mime>;base64,..."}

    Always answers 200: failures are returned as {"error": message} so the
    caller can show an alert and retry.
    """
    outcome = await FaceMatchVerifier(settings).verify(payload)
    return build_face_match_response(outcome)
