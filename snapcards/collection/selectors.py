"""
Read-only views over a card collection.

These never mutate anything; UI code uses them to filter, group and summarize.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime

from snapcards.core.models import Card


def search_cards(cards: Iterable[Card], term: str) -> list[Card]:
    """Case-insensitive substring match on either side. Blank term matches all."""
    needle = term.strip().lower()
    if not needle:
        return list(cards)
    return [c for c in cards if needle in c.front.lower() or needle in c.back.lower()]


def cards_in_folder(cards: Iterable[Card], folder_id: str | None) -> list[Card]:
    """Cards filed under ``folder_id``; ``None`` selects unfiled cards."""
    return [c for c in cards if c.folder_id == folder_id]


def favorite_cards(cards: Iterable[Card]) -> list[Card]:
    return [c for c in cards if c.is_favorite]


def card_date(card: Card) -> date:
    """Local calendar day the card was created."""
    return datetime.fromtimestamp(card.created_at / 1000).date()


def group_by_date(cards: Iterable[Card]) -> list[tuple[date, list[Card]]]:
    """
    Group cards by creation day.

    Returns:
        (day, cards) pairs, newest day first; cards keep collection order
    """
    groups: dict[date, list[Card]] = {}
    for card in cards:
        groups.setdefault(card_date(card), []).append(card)
    return sorted(groups.items(), key=lambda item: item[0], reverse=True)


def accuracy(card: Card) -> int | None:
    """Rounded percentage of correct answers, None if never answered."""
    if card.answered == 0:
        return None
    return round(card.correct / card.answered * 100)


@dataclass
class CollectionStats:
    """Totals for the stats screen."""

    total_cards: int
    favorites: int
    unfiled: int
    correct: int
    wrong: int

    @property
    def answered(self) -> int:
        return self.correct + self.wrong

    @property
    def accuracy(self) -> int | None:
        if self.answered == 0:
            return None
        return round(self.correct / self.answered * 100)


def collection_stats(cards: Sequence[Card]) -> CollectionStats:
    return CollectionStats(
        total_cards=len(cards),
        favorites=sum(1 for c in cards if c.is_favorite),
        unfiled=sum(1 for c in cards if c.folder_id is None),
        correct=sum(c.correct for c in cards),
        wrong=sum(c.wrong for c in cards),
    )
