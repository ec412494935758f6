"""
Agent executor for running agents with structured output.
"""
import logging
from typing import Any, TypeVar

from agent_framework import ChatMessage, DataContent, Role, TextContent
from pydantic import BaseModel

from src.utils.json_parser import JSONParser

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def build_image_message(text: str, image_uris: list[tuple[str, str]]) -> ChatMessage:
    """
    Build a single user message carrying text followed by images.

    Args:
        text: Instruction text placed before the images
        image_uris: (data_uri, media_type) pairs, forwarded unmodified

    Returns:
        ChatMessage with one text content and one data content per image
    """
    contents: list[Any] = [TextContent(text=text)]
    for uri, media_type in image_uris:
        contents.append(DataContent(uri=uri, media_type=media_type))
    return ChatMessage(role=Role.USER, contents=contents)


async def run_agent_with_format(
    agent: Any,
    messages: str | ChatMessage | list[ChatMessage],
    response_format: type[ModelT],
) -> ModelT:
    """
    Execute agent once and return its output as ``response_format``.

    Uses the structured value when the client parsed one, otherwise extracts JSON
    from the response text and validates it with Pydantic. No retries: any
    transport error or unparseable output propagates to the caller.

    Args:
        agent: Agent instance
        messages: Input for the agent
        response_format: Pydantic BaseModel class for structured output

    Returns:
        Validated instance of ``response_format``

    Raises:
        ValueError: If the response holds no JSON object
        pydantic.ValidationError: If the JSON does not fit ``response_format``
    """
    response = await agent.run(messages, response_format=response_format)

    value = getattr(response, "value", None)
    if isinstance(value, response_format):
        logger.debug(f"Structured {response_format.__name__} returned by agent")
        return value

    full_text = getattr(response, "text", "") or ""
    logger.debug(
        f"run_agent_with_format: full_text length={len(full_text)}, "
        f"response_format={response_format.__name__}"
    )
    json_data = JSONParser.extract_json(full_text)
    if not json_data:
        raise ValueError(
            f"Could not extract JSON from response for {response_format.__name__}. "
            f"Full text (first 500 chars): {full_text[:500]}"
        )
    return response_format.model_validate(json_data)
