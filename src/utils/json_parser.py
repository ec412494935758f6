"""
JSON Parser utility for extracting JSON from LLM responses.
"""
import json
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

_CODE_BLOCK_RE = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)
_OBJECT_RE = re.compile(r"(\{.*\})", re.DOTALL)


class JSONParser:
    """Helper class to extract clean JSON from LLM responses."""

    @staticmethod
    def _loads_object(text: str) -> dict[str, Any] | None:
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, TypeError):
            return None
        return data if isinstance(data, dict) else None

    @staticmethod
    def extract_json(text: str) -> dict[str, Any]:
        """Attempts to extract a JSON object from text."""
        if not text:
            return {}

        data = JSONParser._loads_object(text)
        if data is not None:
            return data

        # Fenced code block
        match = _CODE_BLOCK_RE.search(text)
        if match:
            data = JSONParser._loads_object(match.group(1))
            if data is not None:
                return data

        # Outermost braces anywhere in the text
        match = _OBJECT_RE.search(text)
        if match:
            data = JSONParser._loads_object(match.group(1))
            if data is not None:
                return data

        logger.warning("JSONParser: Could not extract JSON from text, returning empty dict")
        return {}
