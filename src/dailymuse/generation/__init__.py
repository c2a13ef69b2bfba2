"""Image generation collaborator: prompt text and the litellm-backed generator."""

from .client import ImageGenerator, classify_generation_error
from .prompts import build_comic_prompt, build_title_prompt

__all__ = [
    "ImageGenerator",
    "build_comic_prompt",
    "build_title_prompt",
    "classify_generation_error",
]
