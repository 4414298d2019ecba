"""Data models for the favorites sync client."""

from src.models.config import (
    AppConfig,
    LoggingConfig,
    RecordStoreConfig,
    StorageConfig,
)
from src.models.record import NewRecord, PendingFormInput, Record, derive_username

__all__ = [
    "Record",
    "NewRecord",
    "PendingFormInput",
    "derive_username",
    "AppConfig",
    "LoggingConfig",
    "RecordStoreConfig",
    "StorageConfig",
]
