"""Local persistence: key-value store and the favorites blob."""

from src.storage.favorites_store import (
    FavoritesStore,
    deserialize_favorites,
    serialize_favorites,
)
from src.storage.kv_store import KeyValueStore, MemoryKeyValueStore, SqliteKeyValueStore

__all__ = [
    "FavoritesStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "SqliteKeyValueStore",
    "deserialize_favorites",
    "serialize_favorites",
]
