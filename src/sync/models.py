"""State and report models for favorites synchronization."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.models.record import PendingFormInput, Record

EMPTY_FAVORITES_MESSAGE = "No favorites yet"
EMPTY_RECORDS_MESSAGE = "No records found"


class SyncState(BaseModel):
    """Canonical in-memory state owned by FavoritesSync.

    The presentation layer reads it but never writes to it.
    """

    records: list[Record] = Field(default_factory=list, description="Records in server order")
    favorites: frozenset[int] = Field(
        default_factory=frozenset, description="Ids marked favorite, orphans included"
    )
    favorites_revision: int = Field(
        default=0, ge=0, description="Bumped by every user change to the favorites set"
    )
    is_loading: bool = Field(default=True, description="True until a load() settles")
    is_submitting: bool = Field(default=False, description="True while add_record() is in flight")
    show_only_favorites: bool = Field(default=False, description="Display filter")
    form: PendingFormInput = Field(default_factory=PendingFormInput)

    @property
    def displayed_records(self) -> list[Record]:
        """Records to present, filtered by favorites when the filter is on."""
        if not self.show_only_favorites:
            return list(self.records)
        return [record for record in self.records if record.id in self.favorites]


class DisplayedRecord(BaseModel):
    """One row of the derived view."""

    model_config = ConfigDict(frozen=True)

    record: Record
    is_favorite: bool


class ViewSnapshot(BaseModel):
    """Immutable read model handed to the presentation layer."""

    model_config = ConfigDict(frozen=True)

    rows: tuple[DisplayedRecord, ...] = ()
    is_loading: bool
    is_submitting: bool
    show_only_favorites: bool
    favorite_count: int = Field(ge=0)
    form: PendingFormInput

    @property
    def form_visible(self) -> bool:
        """The create form is hidden while only favorites are shown."""
        return not self.show_only_favorites

    @property
    def can_submit(self) -> bool:
        return not self.is_submitting

    @property
    def empty_message(self) -> str | None:
        if self.rows:
            return None
        return EMPTY_FAVORITES_MESSAGE if self.show_only_favorites else EMPTY_RECORDS_MESSAGE


class LoadReport(BaseModel):
    """Report of a load() operation."""

    record_count: int = Field(default=0, ge=0, description="Records held after the load")
    favorite_count: int = Field(default=0, ge=0, description="Favorites held after the load")
    favorites_restored: bool = Field(
        default=False, description="True if a persisted favorites blob was applied"
    )
    duration_seconds: float = Field(default=0.0, ge=0.0, description="Load duration in seconds")
    start_time: datetime = Field(..., description="Load start timestamp")
    end_time: datetime = Field(..., description="Load end timestamp")
    errors: list[str] = Field(
        default_factory=list, description="List of errors encountered during load"
    )

    @property
    def success(self) -> bool:
        """Check if load completed without errors."""
        return len(self.errors) == 0
