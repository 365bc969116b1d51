"""
Storage service for cards and folders.

Serializes the two sequences to JSON under fixed keys in a synchronous
key-value store and exposes an async save/load contract; backend calls run
in a worker thread so callers never block the event loop.

Loading migrates older card records:
- missing ``isFavorite`` defaults to False
- missing or null ``folderId`` stays absent
"""

from __future__ import annotations

import asyncio
import json
import sqlite3
from collections.abc import Iterable
from typing import Any

from loguru import logger
from pydantic import BaseModel, ValidationError

from snapcards.core.errors import StorageCorrupt, StorageUnavailable
from snapcards.core.models import Card, Folder
from snapcards.storage.kv import KeyValueStore

DEFAULT_CARDS_KEY = "flashcards"
DEFAULT_FOLDERS_KEY = "flashcards_folders"

_BACKEND_ERRORS = (OSError, sqlite3.Error)


def migrate_card_record(record: dict[str, Any]) -> dict[str, Any]:
    """
    Bring a stored card record up to the current layout.

    Idempotent: records that already carry the new fields come back equal.
    """
    migrated = dict(record)
    migrated.setdefault("isFavorite", False)
    if migrated.get("folderId") is None:
        migrated.pop("folderId", None)
    return migrated


class StorageService:
    """
    Async facade over a key-value store.

    Args:
        kv: Synchronous backend
        cards_key: Key holding the card array
        folders_key: Key holding the folder array
    """

    def __init__(
        self,
        kv: KeyValueStore,
        cards_key: str = DEFAULT_CARDS_KEY,
        folders_key: str = DEFAULT_FOLDERS_KEY,
    ):
        self.kv = kv
        self.cards_key = cards_key
        self.folders_key = folders_key

    # =========================================================================
    # Writes
    # =========================================================================

    async def save(self, cards: Iterable[Card]) -> None:
        """Write all cards. Raises StorageUnavailable on failure."""
        await self._write(self.cards_key, [c.to_record() for c in cards])

    async def save_folders(self, folders: Iterable[Folder]) -> None:
        """Write all folders. Raises StorageUnavailable on failure."""
        await self._write(self.folders_key, [f.to_record() for f in folders])

    async def clear(self) -> None:
        """Remove both keys."""
        try:
            await asyncio.to_thread(self.kv.remove_item, self.cards_key)
            await asyncio.to_thread(self.kv.remove_item, self.folders_key)
        except _BACKEND_ERRORS as e:
            raise StorageUnavailable(f"Could not clear storage: {e}") from e

    async def _write(self, key: str, records: list[dict]) -> None:
        data = json.dumps(records, ensure_ascii=False)
        try:
            await asyncio.to_thread(self.kv.set_item, key, data)
        except _BACKEND_ERRORS as e:
            logger.error(f"Failed to save '{key}': {e}")
            raise StorageUnavailable(
                f"Could not save {key}. The data directory may be read-only or full.", key=key
            ) from e
        logger.debug(f"Saved {len(records)} records under '{key}'")

    # =========================================================================
    # Reads
    # =========================================================================

    async def load(self) -> list[Card]:
        """
        Load all cards, migrating older records.

        Returns:
            Cards in stored order; empty list on first run

        Raises:
            StorageCorrupt: Payload is not a JSON array of valid card records
            StorageUnavailable: Backend could not be read
        """
        records = await self._read(self.cards_key)
        return self._validate(Card, [self._as_dict(r, self.cards_key) for r in records],
                              self.cards_key, migrate=migrate_card_record)

    async def load_folders(self) -> list[Folder]:
        """Load all folders; empty list on first run."""
        records = await self._read(self.folders_key)
        return self._validate(Folder, [self._as_dict(r, self.folders_key) for r in records],
                              self.folders_key)

    async def _read(self, key: str) -> list[Any]:
        try:
            data = await asyncio.to_thread(self.kv.get_item, key)
        except UnicodeDecodeError as e:
            logger.error(f"Stored '{key}' is not valid text: {e}")
            raise StorageCorrupt(f"Could not decode stored {key}.", key=key) from e
        except _BACKEND_ERRORS as e:
            logger.error(f"Failed to read '{key}': {e}")
            raise StorageUnavailable(f"Could not read {key} from storage.", key=key) from e

        if not data:
            return []

        try:
            parsed = json.loads(data)
        except (json.JSONDecodeError, RecursionError) as e:
            logger.error(f"Stored '{key}' is not valid JSON: {e}")
            raise StorageCorrupt(f"Could not load {key} from storage.", key=key) from e

        if not isinstance(parsed, list):
            raise StorageCorrupt(
                f"Stored {key} is a {type(parsed).__name__}, expected a list.", key=key
            )
        return parsed

    @staticmethod
    def _as_dict(record: Any, key: str) -> dict:
        if not isinstance(record, dict):
            raise StorageCorrupt(f"Stored {key} contains a non-object entry.", key=key)
        return record

    @staticmethod
    def _validate(model: type[BaseModel], records: list[dict], key: str, migrate=None) -> list:
        items = []
        for record in records:
            if migrate is not None:
                record = migrate(record)
            try:
                items.append(model.model_validate(record))
            except ValidationError as e:
                logger.error(f"Invalid record in '{key}': {e}")
                raise StorageCorrupt(f"Stored {key} contains an invalid record.", key=key) from e
        return items
