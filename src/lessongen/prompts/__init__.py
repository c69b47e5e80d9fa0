"""Prompt templates for lesson generation."""

from .lesson_prompts import (
    REQUIRED_SECTIONS,
    SYSTEM_PROMPT,
    build_lesson_prompt,
)

__all__ = [
    "REQUIRED_SECTIONS",
    "SYSTEM_PROMPT",
    "build_lesson_prompt",
]
