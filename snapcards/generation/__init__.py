"""
Card generation: the Gemini collaborator and the upload flow that uses it.
"""

from snapcards.generation.gemini_service import GeminiCardGenerator, GeneratedPair, parse_pairs
from snapcards.generation.ingest import (
    CardGenerator,
    IngestResult,
    create_cards_from_image,
    create_cards_from_text,
)

__all__ = [
    "GeminiCardGenerator",
    "GeneratedPair",
    "parse_pairs",
    "CardGenerator",
    "IngestResult",
    "create_cards_from_image",
    "create_cards_from_text",
]
