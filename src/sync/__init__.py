"""Favorites synchronization and view derivation."""

from src.sync.favorites_sync import FavoritesSync
from src.sync.models import DisplayedRecord, LoadReport, SyncState, ViewSnapshot
from src.sync.presenter import LoggingPresenter, Presenter

__all__ = [
    "DisplayedRecord",
    "FavoritesSync",
    "LoadReport",
    "LoggingPresenter",
    "Presenter",
    "SyncState",
    "ViewSnapshot",
]
