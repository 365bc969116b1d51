"""
Card generation service backed by Google Gemini.

Two calls, both fallible:
1. extract_text(): photographed notes -> raw text
2. generate_cards(): raw text -> front/back pairs

Failures surface as GenerationFailed; nothing here touches the card store.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

from loguru import logger
from pydantic import BaseModel, TypeAdapter, ValidationError

from snapcards.config import PLACEHOLDER_API_KEYS, get_settings
from snapcards.core.errors import GenerationFailed, GenerationNotConfigured

EXTRACT_PROMPT = "Extract all text from this image. Preserve the line breaks and language."

GENERATE_PROMPT = """Analyze the following text and convert it into flashcards.
Each flashcard should have a "front" (question/term) and a "back" (answer/definition).
Intelligently identify pairs based on separators like ':', '-', or '?'.
If no clear separator exists, use context to create meaningful pairs.
Respond with a JSON array of objects with exactly the keys "front" and "back".

Text to analyze:

---
{text}
---"""


class GeneratedPair(BaseModel):
    """One front/back pair proposed by the model."""

    front: str
    back: str


_PAIRS = TypeAdapter(list[GeneratedPair])

# Gemini OpenAPI-subset schema for the array of pairs
RESPONSE_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "front": {"type": "STRING"},
            "back": {"type": "STRING"},
        },
        "required": ["front", "back"],
    },
}


class GeminiCardGenerator:
    """
    Gemini client for text extraction and card generation.

    Args:
        api_key: Gemini API key (defaults to settings)
        model_name: Model to call (defaults to settings.ai_model)
        timeout_seconds: Per-request timeout
    """

    def __init__(
        self,
        api_key: str | None = None,
        model_name: str | None = None,
        timeout_seconds: float | None = None,
    ):
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.model_name = model_name or settings.ai_model
        self.timeout_seconds = timeout_seconds or settings.generation_timeout_seconds
        self._client = None

    @property
    def client(self):
        """Lazy-load Gemini client."""
        if self._client is None:
            if self.api_key is None or self.api_key.strip() in PLACEHOLDER_API_KEYS:
                raise GenerationNotConfigured(
                    "Gemini API key is not configured. Set SNAPCARDS_GEMINI_API_KEY or GEMINI_API_KEY."
                )
            import google.generativeai as genai

            genai.configure(api_key=self.api_key)
            self._client = genai.GenerativeModel(model_name=self.model_name)
        return self._client

    async def extract_text(self, image_bytes: bytes, mime_type: str = "image/jpeg") -> str:
        """Return all text visible in the image (may be empty)."""
        client = self.client
        logger.info(f"Extracting text from {len(image_bytes)} byte image with {self.model_name}")
        try:
            response = await asyncio.to_thread(
                client.generate_content,
                [{"mime_type": mime_type, "data": image_bytes}, EXTRACT_PROMPT],
                request_options={"timeout": self.timeout_seconds},
            )
            return (response.text or "").strip()
        except Exception as e:
            logger.error(f"Error extracting text from image: {e}")
            raise GenerationFailed(
                "Failed to process image with Gemini. Check your API key and try again."
            ) from e

    async def generate_cards(self, text: str) -> list[GeneratedPair]:
        """Turn raw text into front/back pairs. Blank text yields no pairs."""
        if not text.strip():
            return []

        client = self.client
        logger.info(f"Generating cards from {len(text)} characters of text")
        try:
            response = await asyncio.to_thread(
                client.generate_content,
                GENERATE_PROMPT.format(text=text),
                generation_config={
                    "response_mime_type": "application/json",
                    "response_schema": RESPONSE_SCHEMA,
                },
                request_options={"timeout": self.timeout_seconds},
            )
            raw = response.text
        except Exception as e:
            logger.error(f"Error generating cards from text: {e}")
            raise GenerationFailed(
                "Failed to generate flashcards. The AI model might be unavailable."
            ) from e

        return parse_pairs(raw)


def parse_pairs(raw: str | None) -> list[GeneratedPair]:
    """
    Parse the model's JSON reply.

    A JSON value that is not an array yields no pairs; unparsable text or
    array items missing front/back raise GenerationFailed.
    """
    try:
        data: Any = json.loads((raw or "").strip())
    except (json.JSONDecodeError, RecursionError) as e:
        raise GenerationFailed("The AI model returned text that is not JSON.") from e

    if not isinstance(data, list):
        logger.warning(f"Expected a JSON array of cards, got {type(data).__name__}")
        return []

    try:
        return _PAIRS.validate_python(data)
    except ValidationError as e:
        raise GenerationFailed("The AI model returned malformed flashcards.") from e
