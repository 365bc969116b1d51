"""
Upload flow: image or text in, new cards in the store.

Both generation calls finish before the first AddCard is dispatched, so a
failure at any step leaves the collection exactly as it was.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from loguru import logger

from snapcards.collection.intents import AddCard
from snapcards.collection.store import CardStore
from snapcards.core.models import Card, new_card
from snapcards.generation.gemini_service import GeneratedPair


class CardGenerator(Protocol):
    """What the upload flow needs from a generation service."""

    async def extract_text(self, image_bytes: bytes, mime_type: str = "image/jpeg") -> str:
        ...

    async def generate_cards(self, text: str) -> list[GeneratedPair]:
        ...


@dataclass
class IngestResult:
    """Outcome of an upload."""

    cards: list[Card] = field(default_factory=list)
    extracted_text: str = ""
    reason: str | None = None  # "no_text", "no_cards" when nothing was added

    @property
    def created(self) -> int:
        return len(self.cards)


async def create_cards_from_image(
    store: CardStore,
    generator: CardGenerator,
    image_bytes: bytes,
    mime_type: str = "image/jpeg",
    folder_id: str | None = None,
) -> IngestResult:
    """
    Extract text from an image, generate cards, and add them to the store.

    Raises:
        GenerationFailed: Either generation call failed (store untouched)
    """
    text = await generator.extract_text(image_bytes, mime_type)
    if not text.strip():
        logger.info("No text found in image")
        return IngestResult(reason="no_text")

    result = await create_cards_from_text(store, generator, text, folder_id=folder_id)
    result.extracted_text = text
    return result


async def create_cards_from_text(
    store: CardStore,
    generator: CardGenerator,
    text: str,
    folder_id: str | None = None,
) -> IngestResult:
    """Generate cards from raw text and add them to the store."""
    pairs = await generator.generate_cards(text)

    cards = []
    for pair in pairs:
        try:
            cards.append(new_card(pair.front, pair.back, folder_id=folder_id))
        except ValueError:
            logger.debug(f"Skipping generated pair with a blank side: {pair!r}")

    if not cards:
        return IngestResult(extracted_text=text, reason="no_cards")

    for card in cards:
        store.dispatch(AddCard(card))
    logger.info(f"Created {len(cards)} cards")
    return IngestResult(cards=cards, extracted_text=text)
