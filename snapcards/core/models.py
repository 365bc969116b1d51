"""
Card and Folder models.

Both are frozen pydantic models: every change produces a new instance, so a
study deck holding cards is a true snapshot. Field aliases match the persisted
camelCase JSON layout (``createdAt``, ``isFavorite``, ``folderId``).
"""

from __future__ import annotations

import time
import uuid

from pydantic import BaseModel, ConfigDict, Field


def now_ms() -> int:
    """Current time as milliseconds since the epoch."""
    return int(time.time() * 1000)


class Card(BaseModel):
    """A front/back question-answer unit with accuracy counters."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    front: str
    back: str
    correct: int = Field(default=0, ge=0)
    wrong: int = Field(default=0, ge=0)
    created_at: int = Field(alias="createdAt")
    is_favorite: bool = Field(default=False, alias="isFavorite")
    # Weak reference, may be None for unfiled cards
    folder_id: str | None = Field(default=None, alias="folderId")

    @property
    def answered(self) -> int:
        return self.correct + self.wrong

    def to_record(self) -> dict:
        """Convert to the persisted JSON shape (``folderId`` omitted when unset)."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Folder(BaseModel):
    """A flat, named grouping of cards."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    color: str
    created_at: int = Field(alias="createdAt")

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True)


def new_card(front: str, back: str, folder_id: str | None = None) -> Card:
    """
    Create a fresh card with a new id and timestamp.

    Args:
        front: Question or term
        back: Answer or definition
        folder_id: Optional folder to file the card under

    Raises:
        ValueError: If either side is blank
    """
    front = front.strip()
    back = back.strip()
    if not front or not back:
        raise ValueError("Card front and back must not be empty")
    return Card(
        id=str(uuid.uuid4()),
        front=front,
        back=back,
        created_at=now_ms(),
        folder_id=folder_id,
    )


def new_folder(name: str, color: str) -> Folder:
    """Create a fresh folder with a new id and timestamp."""
    name = name.strip()
    if not name:
        raise ValueError("Folder name must not be empty")
    return Folder(id=str(uuid.uuid4()), name=name, color=color, created_at=now_ms())
