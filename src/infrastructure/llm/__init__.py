"""LLM infrastructure module."""

from src.infrastructure.llm.executor import build_image_message, run_agent_with_format
from src.infrastructure.llm.factory import (
    is_anthropic_model,
    azure_agent_client,
    create_anthropic_agent,
    get_shared_credential,
    close_shared_credential,
)

__all__ = [
    "build_image_message",
    "run_agent_with_format",
    "is_anthropic_model",
    "azure_agent_client",
    "create_anthropic_agent",
    "get_shared_credential",
    "close_shared_credential",
]
