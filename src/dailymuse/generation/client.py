"""Image generation via litellm.

The generator returns inline data-URL refs, ready to drop into a
``PublishDraft``. Provider failures are mapped onto the
``GenerationError`` family; nothing here touches the stores.

Requires ``dailymuse[generation]``.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from dailymuse.core.exceptions import (
    ContentBlockedError,
    GenerationAuthError,
    GenerationError,
    GenerationQuotaError,
)
from dailymuse.entries import codec

from .prompts import build_comic_prompt, build_title_prompt

DEFAULT_MODEL = "gemini/imagen-3.0-generate-002"


def _require_litellm():
    """Lazy import with clear error message."""
    try:
        import litellm

        return litellm
    except ImportError:
        raise ImportError("Install image generation support with: pip install dailymuse[generation]") from None


def classify_generation_error(exc: Exception) -> GenerationError:
    """Map a provider exception onto the GenerationError family.

    litellm exception types are checked first; message keywords catch
    providers that only report a generic error.
    """
    if isinstance(exc, GenerationError):
        return exc

    try:
        import litellm
    except ImportError:
        litellm = None

    if litellm is not None:
        if isinstance(exc, litellm.AuthenticationError):
            return GenerationAuthError("Invalid API key. Please check your image provider API key.")
        if isinstance(exc, litellm.RateLimitError):
            return GenerationQuotaError("API quota exceeded. Please check your billing or try again later.")
        if isinstance(exc, litellm.ContentPolicyViolationError):
            return ContentBlockedError("Content was blocked by safety filters. Try modifying your prompt.")

    message = str(exc)
    lowered = message.lower()
    if "api key" in lowered:
        return GenerationAuthError("Invalid API key. Please check your image provider API key.")
    if "quota" in lowered or "limit" in lowered:
        return GenerationQuotaError("API quota exceeded. Please check your billing or try again later.")
    if "safety" in lowered or "blocked" in lowered:
        return ContentBlockedError("Content was blocked by safety filters. Try modifying your prompt.")
    return GenerationError(message or "Failed to generate image. Please try again.")


def _first_image(response: Any) -> str:
    """Extract the first base64 payload from an image-generation response."""
    data = getattr(response, "data", None)
    if data is None and isinstance(response, dict):
        data = response.get("data")
    if not data:
        raise GenerationError("No image generated.")

    first = data[0]
    b64 = first.get("b64_json") if isinstance(first, dict) else getattr(first, "b64_json", None)
    if not b64:
        raise GenerationError("No image generated.")
    return b64


class ImageGenerator:
    """Generates the title card and comic images.

    Args:
        model: litellm model name, e.g. ``gemini/imagen-3.0-generate-002``.
        size: Requested image size.
    """

    def __init__(self, model: str = DEFAULT_MODEL, size: str = "1024x1024"):
        self.model = model
        self.size = size

    async def _generate(self, prompt: str, label: str) -> str:
        litellm = _require_litellm()
        try:
            response = await litellm.aimage_generation(
                prompt=prompt,
                model=self.model,
                n=1,
                size=self.size,
                response_format="b64_json",
            )
            payload = _first_image(response)
        except Exception as e:
            error = classify_generation_error(e)
            logger.error(f"{label} generation failed: {e}")
            raise error from e

        data = codec.decode(f"data:image/png;base64,{payload}")
        return codec.encode(data, codec.sniff_mime(data))

    async def generate_title(self, title: str, episode_number: str, character_description: str = "") -> str:
        """Generate the title card. Returns an inline data URL."""
        return await self._generate(build_title_prompt(title, episode_number, character_description), "Title")

    async def generate_comic(self, concept: str, character_description: str = "") -> str:
        """Generate the four-panel comic. Returns an inline data URL."""
        return await self._generate(build_comic_prompt(concept, character_description), "Comic")
