"""
Persistence layer: key-value backends and the async storage service.
"""

from snapcards.storage.kv import (
    JsonFileKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
    SqliteKeyValueStore,
    create_kv_store,
)
from snapcards.storage.storage_service import StorageService, migrate_card_record

__all__ = [
    "KeyValueStore",
    "JsonFileKeyValueStore",
    "SqliteKeyValueStore",
    "MemoryKeyValueStore",
    "create_kv_store",
    "StorageService",
    "migrate_card_record",
]
