"""Tests for the face match verifier."""

import logging
from unittest.mock import AsyncMock, patch

import pytest

from src.services.verification import (
    FaceMatchInput,
    FaceMatchResult,
    FaceMatchServiceError,
    FaceMatchVerifier,
    VerificationFailure,
)

from tests.helpers import JPEG_URI, PNG_URI

RUN_AGENT = "src.services.verification.verifier.run_face_match_agent"


def _payload(selfie=PNG_URI, stored=JPEG_URI):
    return {"selfieDataUri": selfie, "storedImageDataUri": stored}


# ==========================================
#  SUCCESS
# ==========================================


@pytest.mark.asyncio
@patch(RUN_AGENT, new_callable=AsyncMock)
async def test_match_returns_model_decision(mock_agent, settings):
    mock_agent.return_value = FaceMatchResult(is_match=True, confidence=0.92)
    result = await FaceMatchVerifier(settings).verify(_payload())

    assert result.to_response() == {"isMatch": True, "confidence": 0.92}
    mock_agent.assert_awaited_once()


@pytest.mark.asyncio
@patch(RUN_AGENT, new_callable=AsyncMock)
async def test_no_match_is_not_an_error(mock_agent, settings):
    mock_agent.return_value = FaceMatchResult(is_match=False, confidence=0.15)
    result = await FaceMatchVerifier(settings).verify(_payload())

    assert result.to_response() == {"isMatch": False, "confidence": 0.15}


@pytest.mark.asyncio
@patch(RUN_AGENT, new_callable=AsyncMock)
async def test_images_forwarded_unmodified_in_order(mock_agent, settings):
    mock_agent.return_value = FaceMatchResult(is_match=True, confidence=0.8)
    await FaceMatchVerifier(settings).verify(_payload())

    images = mock_agent.call_args[0][1]
    assert images == [(PNG_URI, "image/png"), (JPEG_URI, "image/jpeg")]


@pytest.mark.asyncio
@patch(RUN_AGENT, new_callable=AsyncMock)
async def test_accepts_model_instance(mock_agent, settings):
    mock_agent.return_value = FaceMatchResult(is_match=True, confidence=0.7)
    payload = FaceMatchInput(selfie_data_uri=PNG_URI, stored_image_data_uri=PNG_URI)
    result = await FaceMatchVerifier(settings).verify(payload)

    assert isinstance(result, FaceMatchResult)


@pytest.mark.asyncio
@patch(RUN_AGENT, new_callable=AsyncMock)
async def test_confidence_passed_through_unclamped(mock_agent, settings):
    mock_agent.return_value = FaceMatchResult(is_match=True, confidence=1.3)
    result = await FaceMatchVerifier(settings).verify(_payload())

    assert result.confidence == 1.3


@pytest.mark.asyncio
@patch(RUN_AGENT, new_callable=AsyncMock)
async def test_repeated_calls_are_independent(mock_agent, settings):
    mock_agent.side_effect = [
        FaceMatchResult(is_match=True, confidence=0.9),
        FaceMatchResult(is_match=False, confidence=0.4),
    ]
    verifier = FaceMatchVerifier(settings)
    first = await verifier.verify(_payload())
    second = await verifier.verify(_payload())

    assert first.is_match is True
    assert second.is_match is False
    assert mock_agent.await_count == 2


# ==========================================
#  INVALID INPUT
# ==========================================


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        None,
        "not an object",
        [PNG_URI, JPEG_URI],
        {},
        {"selfieDataUri": PNG_URI},
        {"storedImageDataUri": JPEG_URI},
        _payload(selfie=""),
        _payload(stored=""),
        _payload(selfie=123),
        _payload(selfie="https://example.com/me.png"),
        _payload(stored="data:image/png,not-base64-marker"),
        _payload(selfie="data:application/pdf;base64,JVBERi0="),
    ],
)
@patch(RUN_AGENT, new_callable=AsyncMock)
async def test_invalid_input_never_calls_model(mock_agent, payload, settings):
    result = await FaceMatchVerifier(settings).verify(payload)

    assert result == VerificationFailure("Invalid input.")
    assert result.to_response() == {"error": "Invalid input."}
    mock_agent.assert_not_awaited()


@pytest.mark.asyncio
@patch(RUN_AGENT, new_callable=AsyncMock)
async def test_configured_image_types_are_enforced(mock_agent, settings):
    settings.face_match_image_types = ["image/jpeg"]
    result = await FaceMatchVerifier(settings).verify(_payload())

    assert result.to_response() == {"error": "Invalid input."}
    mock_agent.assert_not_awaited()


# ==========================================
#  SERVICE FAILURE
# ==========================================


@pytest.mark.asyncio
@patch(RUN_AGENT, new_callable=AsyncMock)
async def test_service_failure_returns_generic_error(mock_agent, settings, caplog):
    mock_agent.side_effect = FaceMatchServiceError("upstream timeout after 30s")
    with caplog.at_level(logging.ERROR):
        result = await FaceMatchVerifier(settings).verify(_payload())

    assert result.to_response() == {
        "error": "An unexpected error occurred during verification."
    }
    assert "upstream timeout" not in result.message
    assert "upstream timeout" in caplog.text
    mock_agent.assert_awaited_once()


@pytest.mark.asyncio
@patch(RUN_AGENT, new_callable=AsyncMock)
async def test_unexpected_exception_is_not_retried(mock_agent, settings):
    mock_agent.side_effect = RuntimeError("boom")
    result = await FaceMatchVerifier(settings).verify(_payload())

    assert isinstance(result, VerificationFailure)
    assert mock_agent.await_count == 1


# ==========================================
#  MODEL CALL
# ==========================================


@pytest.mark.asyncio
@patch("src.services.verification.verifier.run_agent_with_format", new_callable=AsyncMock)
@patch("src.services.verification.verifier.create_anthropic_agent")
async def test_run_face_match_agent_wraps_errors(mock_create, mock_run, settings):
    from src.services.verification.verifier import run_face_match_agent

    settings.face_match_agent_model = "claude-sonnet-4-5"
    mock_run.side_effect = ValueError("Could not extract JSON")

    with pytest.raises(FaceMatchServiceError):
        await run_face_match_agent(settings, [(PNG_URI, "image/png"), (JPEG_URI, "image/jpeg")])
    mock_run.assert_awaited_once()
    assert mock_create.call_args.kwargs["response_format"] is FaceMatchResult
