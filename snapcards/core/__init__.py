"""
Core types shared by the collection engine, study controller and storage.
"""

from snapcards.core.errors import (
    GenerationFailed,
    GenerationNotConfigured,
    SnapCardsError,
    StorageCorrupt,
    StorageError,
    StorageUnavailable,
)
from snapcards.core.models import Card, Folder, new_card, new_folder, now_ms

__all__ = [
    "Card",
    "Folder",
    "new_card",
    "new_folder",
    "now_ms",
    "SnapCardsError",
    "StorageError",
    "StorageUnavailable",
    "StorageCorrupt",
    "GenerationFailed",
    "GenerationNotConfigured",
]
