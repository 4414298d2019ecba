"""Factory functions wiring the sync core to its collaborators.

Developers can modify these functions to swap implementations without changing
other code.

Default implementations:
- Record store: RecordStoreClient over requests (jsonplaceholder-compatible API)
- Key-value store: SqliteKeyValueStore (local file, no external services required)
"""

import structlog

from src.errors import StorageError
from src.ingestion.record_client import RecordStoreClient
from src.models.config import AppConfig, RecordStoreConfig, StorageConfig
from src.storage.favorites_store import FavoritesStore
from src.storage.kv_store import KeyValueStore, SqliteKeyValueStore
from src.sync.favorites_sync import FavoritesSync
from src.sync.presenter import LoggingPresenter, Presenter

log = structlog.stdlib.get_logger()


def get_record_client(config: RecordStoreConfig) -> RecordStoreClient:
    """Get the configured record store client.

    Args:
        config: Record store section of the application config

    Returns:
        RecordStoreClient instance
    """
    return RecordStoreClient(
        base_url=str(config.base_url),
        resource=config.resource,
        timeout=config.timeout_seconds,
    )


def get_key_value_store(config: StorageConfig) -> KeyValueStore:
    """Get the configured key-value store implementation.

    Example - keep favorites in memory only:
        from src.storage.kv_store import MemoryKeyValueStore
        return MemoryKeyValueStore()

    Args:
        config: Storage section of the application config

    Returns:
        KeyValueStore instance

    Raises:
        ValueError: If the storage path is empty
        StorageError: If the store cannot be initialized
    """
    if not config.path or not config.path.strip():
        error_msg = "storage path cannot be empty"
        log.error("get_key_value_store_failed", error=error_msg)
        raise ValueError(error_msg)

    try:
        return SqliteKeyValueStore(config.path)
    except StorageError as e:
        log.error(
            "get_key_value_store_failed",
            path=config.path,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise


def build_favorites_sync(
    config: AppConfig,
    presenter: Presenter | None = None,
    kv_store: KeyValueStore | None = None,
    record_client: RecordStoreClient | None = None,
) -> FavoritesSync:
    """Assemble a FavoritesSync from configuration.

    Args:
        config: Application configuration
        presenter: Presentation outlet (defaults to LoggingPresenter)
        kv_store: Optional key-value store instance (built from config if None)
        record_client: Optional record client instance (built from config if None)

    Returns:
        Ready-to-use FavoritesSync; call load() to populate it
    """
    if kv_store is None:
        kv_store = get_key_value_store(config.storage)
    if record_client is None:
        record_client = get_record_client(config.record_store)

    favorites_store = FavoritesStore(kv_store, key=config.storage.favorites_key)

    log.info(
        "favorites_sync_built",
        record_store_url=record_client.url,
        favorites_key=config.storage.favorites_key,
    )

    return FavoritesSync(
        record_client=record_client,
        favorites_store=favorites_store,
        presenter=presenter or LoggingPresenter(),
    )
