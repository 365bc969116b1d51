"""
Error taxonomy for snapcards.

Storage errors are non-fatal: the state container records them and keeps the
in-memory collection as is. Generation errors only stop new cards from being
added.
"""

from __future__ import annotations


class SnapCardsError(Exception):
    """Base class for all snapcards errors."""


class StorageError(SnapCardsError):
    """A read or write against the key-value store failed."""

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message)
        self.key = key


class StorageUnavailable(StorageError):
    """Write failed (disk full, quota exceeded, read-only location)."""


class StorageCorrupt(StorageError):
    """Stored payload could not be parsed or validated."""


class GenerationFailed(SnapCardsError):
    """The text/card generation service could not produce a result."""


class GenerationNotConfigured(GenerationFailed):
    """No usable API key for the generation service."""
