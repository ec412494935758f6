"""Agent factory helpers."""

import logging
from contextlib import asynccontextmanager
from typing import Any

from agent_framework.anthropic import AnthropicClient
from agent_framework_azure_ai import AzureAIAgentClient
from azure.identity.aio import DefaultAzureCredential

from src.config.settings import Settings

logger = logging.getLogger(__name__)

_shared_credential: DefaultAzureCredential | None = None


def get_shared_credential() -> DefaultAzureCredential:
    """
    Get or create a shared DefaultAzureCredential instance.

    All agents reuse the same credential so tokens are cached across requests.
    """
    global _shared_credential
    if _shared_credential is None:
        _shared_credential = DefaultAzureCredential()
    return _shared_credential


async def close_shared_credential() -> None:
    """
    Close the shared credential instance.

    Should be called during application shutdown to properly clean up resources.
    """
    global _shared_credential
    if _shared_credential is not None:
        await _shared_credential.close()
        _shared_credential = None


def is_anthropic_model(model: str) -> bool:
    """Check if model is Anthropic (Claude)."""
    return "claude" in model.lower()


@asynccontextmanager
async def azure_agent_client(
    settings: Settings,
    model: str,
    credential: DefaultAzureCredential,
):
    """
    Azure AI (Foundry) agent client as context manager.

    The `model` argument must be the deployment name configured in your project.
    """
    async with AzureAIAgentClient(
        project_endpoint=settings.azure_ai_project_endpoint,
        model_deployment_name=model,
        async_credential=credential,
    ) as client:
        yield client


def create_anthropic_agent(
    settings: Settings,
    name: str,
    instructions: str,
    model: str,
    max_tokens: int = 1024,
    temperature: float = 0.0,
    response_format: Any | None = None,
):
    """
    Create an Anthropic (Claude) agent.

    Usage:
        agent = create_anthropic_agent(settings, "FaceMatcher", prompt, model, response_format=FaceMatchResult)
        response = await run_agent_with_format(agent, messages, response_format=FaceMatchResult)

    Args:
        settings: Application settings
        name: Agent name
        instructions: System prompt/instructions
        model: Claude model name
        max_tokens: Maximum tokens for response
        temperature: Sampling temperature
        response_format: Optional Pydantic BaseModel for structured output
    """
    logger.debug(f"Creating Anthropic agent '{name}' with model: {model}")

    client = AnthropicClient(
        model_id=model,
        api_key=settings.anthropic_api_key,
    )
    agent_kwargs: dict[str, Any] = {
        "name": name,
        "instructions": instructions,
        "max_tokens": max_tokens,
        "temperature": temperature,
    }
    if response_format:
        agent_kwargs["response_format"] = response_format

    return client.create_agent(**agent_kwargs)
