"""Property-based tests for favorites persistence.

**Feature: favorites-sync, Property 5: Round-trip persistence**
"""

import asyncio
import tempfile
from pathlib import Path

import pytest
import structlog
from hypothesis import given, settings
from hypothesis import strategies as st

from src.errors import StorageError
from src.storage.favorites_store import (
    FavoritesStore,
    deserialize_favorites,
    serialize_favorites,
)
from src.storage.kv_store import MemoryKeyValueStore, SqliteKeyValueStore

log = structlog.stdlib.get_logger()

id_sets = st.sets(st.integers(min_value=-(2**53), max_value=2**53), max_size=50)


@given(ids=id_sets)
@settings(max_examples=100)
def test_property_5_round_trip_persistence(ids: set[int]):
    """Property 5: Round-trip persistence.

    For any set of ids, writing the serialized set and reading it back yields
    an equal set.

    **Feature: favorites-sync, Property 5: Round-trip persistence**
    """
    log.info("test_property_5_round_trip_persistence", id_count=len(ids))

    store = FavoritesStore(MemoryKeyValueStore(), key="favorites")

    async def scenario():
        await store.write_favorites(serialize_favorites(ids))
        return await store.read_favorites()

    blob = asyncio.run(scenario())

    assert blob is not None
    assert deserialize_favorites(blob) == ids


@given(ids=st.lists(st.integers(min_value=0, max_value=1000), max_size=30))
def test_serialization_ignores_order_and_duplicates(ids: list[int]):
    """Test that equal sets always encode to the same blob."""
    assert serialize_favorites(ids) == serialize_favorites(reversed(ids))
    assert serialize_favorites(ids) == serialize_favorites(set(ids))


def test_legacy_unsorted_blob_is_accepted():
    """Test that blobs written in insertion order with duplicates still decode."""
    assert deserialize_favorites("[3, 1, 2, 3]") == {1, 2, 3}
    assert deserialize_favorites("[]") == set()


@pytest.mark.parametrize(
    "blob",
    ["not json", "{}", '"1,2"', "[1, \"2\"]", "[1.5]", "[true]", "null", "[null]"],
)
def test_malformed_blob_raises_storage_error(blob: str):
    """Test that anything but a JSON array of integers is rejected."""
    with pytest.raises(StorageError):
        deserialize_favorites(blob)


def test_read_returns_none_on_first_run():
    """Test that a missing blob is reported as None, not an error."""
    store = FavoritesStore(MemoryKeyValueStore(), key="favorites")

    assert asyncio.run(store.read_favorites()) is None


def test_clear_removes_blob_and_tolerates_missing_key():
    """Test that clear deletes the entry and can run on an empty store."""
    kv_store = MemoryKeyValueStore({"favorites": "[1]", "other": "x"})
    store = FavoritesStore(kv_store, key="favorites")

    async def scenario():
        await store.clear_favorites()
        await store.clear_favorites()
        return await store.read_favorites()

    assert asyncio.run(scenario()) is None
    assert kv_store.data == {"other": "x"}


def test_underlying_failures_become_storage_errors():
    """Test that arbitrary key-value failures surface as StorageError."""

    class BrokenKeyValueStore(MemoryKeyValueStore):
        def get(self, key):
            raise OSError("io error")

        def set(self, key, value):
            raise OSError("io error")

        def delete(self, key):
            raise OSError("io error")

    store = FavoritesStore(BrokenKeyValueStore(), key="favorites")

    for operation in (
        store.read_favorites(),
        store.write_favorites("[1]"),
        store.clear_favorites(),
    ):
        with pytest.raises(StorageError) as exc_info:
            asyncio.run(operation)
        assert isinstance(exc_info.value.__cause__, OSError)


class TestSqliteKeyValueStore:
    """Test durable storage across store instances."""

    def test_values_survive_reopening(self):
        """Test that a new instance on the same file sees earlier writes."""
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = str(Path(tmp_dir) / "nested" / "favorites.db")

            first = SqliteKeyValueStore(path)
            first.set("@my_favorites_ids", "[1, 2]")
            first.set("@my_favorites_ids", "[2]")

            second = SqliteKeyValueStore(path)
            assert second.get("@my_favorites_ids") == "[2]"
            assert second.get("@my_users_data") is None

            second.delete("@my_favorites_ids")
            second.delete("@my_favorites_ids")
            assert first.get("@my_favorites_ids") is None

    @given(ids=st.sets(st.integers(min_value=0, max_value=10_000), max_size=30))
    @settings(max_examples=20, deadline=None)
    def test_round_trip_through_sqlite(self, ids: set[int]):
        """Test the favorites round trip through a real database file."""
        with tempfile.TemporaryDirectory() as tmp_dir:
            store = FavoritesStore(SqliteKeyValueStore(str(Path(tmp_dir) / "kv.db")))

            async def scenario():
                await store.write_favorites(serialize_favorites(ids))
                return await store.read_favorites()

            assert deserialize_favorites(asyncio.run(scenario())) == ids

    def test_unusable_path_raises_storage_error(self):
        """Test that a path that cannot hold a database fails at construction."""
        with tempfile.TemporaryDirectory() as tmp_dir:
            # A directory cannot be opened as a database file
            with pytest.raises(StorageError):
                SqliteKeyValueStore(tmp_dir)
