"""Synchronization core for records, favorites and the derived view."""

import asyncio
from datetime import datetime

import structlog

from src.errors import NetworkError, StorageError, ValidationError
from src.ingestion.record_client import RecordStoreClient
from src.models.record import NewRecord, PendingFormInput, Record, derive_username
from src.storage.favorites_store import (
    FavoritesStore,
    deserialize_favorites,
    serialize_favorites,
)
from src.sync.models import DisplayedRecord, LoadReport, SyncState, ViewSnapshot
from src.sync.presenter import Presenter

log = structlog.stdlib.get_logger()


class FavoritesSync:
    """Owns the in-memory state and coordinates the record store and favorites store.

    The in-memory favorites set is the source of truth; persistence trails it.
    Every mutation of the set is computed from the current in-memory value at
    the point it is applied, never from a value read before an ``await``, so
    overlapping operations never lose each other's effect.

    In-flight operations are exposed through ``is_loading`` and
    ``is_submitting``; concurrent calls are not rejected here.
    """

    def __init__(
        self,
        record_client: RecordStoreClient,
        favorites_store: FavoritesStore,
        presenter: Presenter,
    ):
        """
        Initialize the synchronization core.

        Args:
            record_client: Client for the remote list/create endpoints
            favorites_store: Persistence for the favorites blob
            presenter: Outlet for user notices and confirmations
        """
        self._record_client = record_client
        self._favorites_store = favorites_store
        self._presenter = presenter
        self._state = SyncState()
        self._persist_lock = asyncio.Lock()

        log.info("favorites_sync_initialized")

    @property
    def records(self) -> list[Record]:
        return list(self._state.records)

    @property
    def favorites(self) -> frozenset[int]:
        return self._state.favorites

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def is_submitting(self) -> bool:
        return self._state.is_submitting

    @property
    def show_only_favorites(self) -> bool:
        return self._state.show_only_favorites

    @property
    def form(self) -> PendingFormInput:
        return self._state.form

    @property
    def displayed_records(self) -> list[Record]:
        return self._state.displayed_records

    def is_favorite(self, record_id: int) -> bool:
        return record_id in self._state.favorites

    def snapshot(self) -> ViewSnapshot:
        """Build an immutable view of the current state for rendering."""
        favorites = self._state.favorites
        return ViewSnapshot(
            rows=tuple(
                DisplayedRecord(record=record, is_favorite=record.id in favorites)
                for record in self._state.displayed_records
            ),
            is_loading=self._state.is_loading,
            is_submitting=self._state.is_submitting,
            show_only_favorites=self._state.show_only_favorites,
            favorite_count=len(favorites),
            form=self._state.form.model_copy(),
        )

    async def load(self) -> LoadReport:
        """
        Fetch the record list and the persisted favorites concurrently.

        A successful fetch replaces the records wholesale. A persisted blob, if
        any, replaces the favorites set unless the user toggled or cleared a
        favorite while the load was in flight; an absent blob leaves it untouched.
        Failures are shown to the user and leave the previous values in place.
        The loading flag is cleared however the load ends.

        Returns:
            LoadReport describing what was applied
        """
        start_time = datetime.now()
        errors: list[str] = []
        favorites_restored = False

        self._state.is_loading = True
        revision = self._state.favorites_revision
        log.info("load_started")

        try:
            records_result, blob_result = await asyncio.gather(
                self._record_client.list_records(),
                self._favorites_store.read_favorites(),
                return_exceptions=True,
            )

            if isinstance(records_result, NetworkError):
                errors.append(f"Failed to load records: {records_result.message}")
                log.error("load_records_failed", error=records_result.message)
                self._presenter.show_error(NetworkError("Could not load records"))
            elif isinstance(records_result, BaseException):
                raise records_result
            else:
                self._state.records = list(records_result)

            try:
                if isinstance(blob_result, BaseException):
                    raise blob_result
                if blob_result is None:
                    log.info("no_persisted_favorites")
                elif self._state.favorites_revision != revision:
                    # Toggled or cleared while loading; the blob predates that
                    log.info(
                        "persisted_favorites_superseded",
                        favorite_count=len(self._state.favorites),
                    )
                else:
                    self._state.favorites = frozenset(deserialize_favorites(blob_result))
                    favorites_restored = True
            except StorageError as e:
                errors.append(f"Failed to load favorites: {e.message}")
                log.error("load_favorites_failed", error=e.message)
                self._presenter.show_error(StorageError("Could not load favorites"))
        finally:
            self._state.is_loading = False

        end_time = datetime.now()
        report = LoadReport(
            record_count=len(self._state.records),
            favorite_count=len(self._state.favorites),
            favorites_restored=favorites_restored,
            duration_seconds=(end_time - start_time).total_seconds(),
            start_time=start_time,
            end_time=end_time,
            errors=errors,
        )

        log.info(
            "load_completed",
            record_count=report.record_count,
            favorite_count=report.favorite_count,
            favorites_restored=favorites_restored,
            duration_seconds=report.duration_seconds,
            success=report.success,
        )
        return report

    async def toggle_favorite(self, record_id: int) -> bool:
        """
        Flip membership of record_id in the favorites set.

        The set is updated in memory before the write is awaited, and the
        write mirrors whatever the set holds when its turn comes. A failed
        write is logged and otherwise ignored: the in-memory change stands.

        Args:
            record_id: Id to toggle; it need not belong to a loaded record

        Returns:
            True if the id is now a favorite
        """
        current = self._state.favorites
        now_favorite = record_id not in current
        updated = current | {record_id} if now_favorite else current - {record_id}
        self._state.favorites = updated
        self._state.favorites_revision += 1

        log.info(
            "favorite_toggled",
            record_id=record_id,
            is_favorite=now_favorite,
            favorite_count=len(updated),
        )

        try:
            await self._persist_favorites()
        except StorageError as e:
            log.error(
                "persist_favorites_failed",
                record_id=record_id,
                favorite_count=len(self._state.favorites),
                error=e.message,
            )

        return now_favorite

    async def clear_all_favorites(self) -> bool:
        """
        Remove every favorite after the user confirms.

        The persisted entry is deleted first; the in-memory set is only
        emptied once that succeeds, so a failed delete changes nothing.

        Returns:
            True if favorites were cleared
        """
        confirmed = await self._presenter.confirm(
            "Confirmation", "Are you sure you want to remove all favorites?"
        )
        if not confirmed:
            log.info("clear_favorites_cancelled")
            return False

        async with self._persist_lock:
            try:
                await self._favorites_store.clear_favorites()
            except StorageError as e:
                log.error(
                    "clear_favorites_failed",
                    favorite_count=len(self._state.favorites),
                    error=e.message,
                )
                self._presenter.show_error(StorageError("Could not remove favorites"))
                return False

            cleared = len(self._state.favorites)
            self._state.favorites = frozenset()
            self._state.favorites_revision += 1

        log.info("favorites_cleared_by_user", cleared_count=cleared)
        self._presenter.show_success("Success", "All favorites have been removed")
        return True

    async def add_record(self, name: str, email: str) -> Record | None:
        """
        Create a record on the remote store and append it to the list.

        Both fields must be non-empty once surrounding whitespace is removed;
        otherwise a ValidationError is shown and nothing else happens. The
        pending form input is cleared on success only, so a failed attempt
        can be retried without retyping.

        Args:
            name: Display name
            email: Contact email

        Returns:
            The created record, or None if validation or the request failed
        """
        name = name.strip()
        email = email.strip()
        if not name or not email:
            error = ValidationError("Please fill in all fields")
            log.warning("add_record_rejected", has_name=bool(name), has_email=bool(email))
            self._presenter.show_error(error)
            return None

        new_record = NewRecord(name=name, email=email, username=derive_username(name))

        self._state.is_submitting = True
        log.info("add_record_started", username=new_record.username)
        try:
            record = await self._record_client.create_record(new_record)
        except NetworkError as e:
            log.error("add_record_failed", username=new_record.username, error=e.message)
            self._presenter.show_error(NetworkError("Could not add the record"))
            return None
        finally:
            self._state.is_submitting = False

        self._state.records = [*self._state.records, record]
        self._state.form = PendingFormInput()

        log.info("add_record_completed", record_id=record.id)
        self._presenter.show_success("Success", f'Record "{name}" added with id {record.id}')
        return record

    async def submit_form(self) -> Record | None:
        """Submit the pending form input through add_record()."""
        form = self._state.form
        return await self.add_record(form.name, form.email)

    def set_form_input(self, name: str | None = None, email: str | None = None) -> None:
        """Update the pending form fields; None leaves a field as it is."""
        updates: dict[str, str] = {}
        if name is not None:
            updates["name"] = name
        if email is not None:
            updates["email"] = email
        self._state.form = self._state.form.model_copy(update=updates)

    async def _persist_favorites(self) -> None:
        # One write at a time, each carrying the set as it is once the lock is held
        async with self._persist_lock:
            blob = serialize_favorites(self._state.favorites)
            await self._favorites_store.write_favorites(blob)

    def set_show_only_favorites(self, flag: bool) -> None:
        """Switch the display filter. No I/O."""
        self._state.show_only_favorites = flag
        log.debug("display_filter_changed", show_only_favorites=flag)

