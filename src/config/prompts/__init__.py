"""System prompts for AI agents."""

from src.config.prompts.face_match import (
    build_face_match_system_prompt,
    build_face_match_user_input,
)

__all__ = [
    "build_face_match_system_prompt",
    "build_face_match_user_input",
]
