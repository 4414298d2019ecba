"""Persistence of the favorites set on top of a key-value store."""

import asyncio
import json
from collections.abc import Iterable

import structlog

from src.errors import StorageError
from src.storage.kv_store import KeyValueStore

log = structlog.stdlib.get_logger()

DEFAULT_FAVORITES_KEY = "@my_favorites_ids"


def serialize_favorites(ids: Iterable[int]) -> str:
    """Encode a set of record ids as a JSON array.

    Ids are sorted so that equal sets always produce the same blob.

    >>> serialize_favorites({3, 1})
    '[1, 3]'
    """
    return json.dumps(sorted(set(ids)))


def deserialize_favorites(blob: str) -> set[int]:
    """Decode a blob produced by serialize_favorites.

    Args:
        blob: JSON array of integer ids (order and duplicates are irrelevant)

    Returns:
        Set of record ids

    Raises:
        StorageError: If the blob is not a JSON array of integers
    """
    try:
        decoded = json.loads(blob)
    except json.JSONDecodeError as e:
        raise StorageError(f"Stored favorites are not valid JSON: {e}") from e

    if not isinstance(decoded, list):
        raise StorageError(
            f"Stored favorites must be a JSON array, got {type(decoded).__name__}"
        )

    ids: set[int] = set()
    for item in decoded:
        # bool is an int subclass but never a valid id
        if isinstance(item, bool) or not isinstance(item, int):
            raise StorageError(f"Stored favorites contain a non-integer id: {item!r}")
        ids.add(item)

    return ids


class FavoritesStore:
    """Reads, writes and clears the serialized favorites blob.

    Holds no business logic. Blocking key-value calls run in a worker thread
    so the event loop keeps serving other operations.
    """

    def __init__(self, kv_store: KeyValueStore, key: str = DEFAULT_FAVORITES_KEY):
        """
        Initialize favorites store.

        Args:
            kv_store: Durable key-value store holding the blob
            key: Key under which the favorites blob is stored
        """
        self._kv_store = kv_store
        self._key = key
        log.info("favorites_store_initialized", key=key)

    @property
    def key(self) -> str:
        return self._key

    async def read_favorites(self) -> str | None:
        """Return the persisted blob, or None on first run.

        Raises:
            StorageError: If the read fails
        """
        blob = await asyncio.to_thread(self._call, "read", self._kv_store.get, self._key)
        log.debug("favorites_read", key=self._key, found=blob is not None)
        return blob

    async def write_favorites(self, blob: str) -> None:
        """Replace the persisted blob.

        Raises:
            StorageError: If the write fails
        """
        await asyncio.to_thread(self._call, "write", self._kv_store.set, self._key, blob)
        log.debug("favorites_written", key=self._key)

    async def clear_favorites(self) -> None:
        """Delete the persisted blob.

        Raises:
            StorageError: If the delete fails
        """
        await asyncio.to_thread(self._call, "clear", self._kv_store.delete, self._key)
        log.info("favorites_cleared", key=self._key)

    def _call(self, action: str, func, *args):
        try:
            return func(*args)
        except StorageError:
            raise
        except Exception as e:
            log.error("favorites_store_failed", action=action, key=self._key, error=str(e))
            raise StorageError(f"Failed to {action} favorites: {e}") from e
