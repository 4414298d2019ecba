"""Error taxonomy for the favorites sync client."""


class SyncError(Exception):
    """Base class for errors that are surfaced to the presentation layer."""

    title: str = "Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NetworkError(SyncError):
    """Remote record store unreachable or returned a non-success response."""

    title = "Network error"


class StorageError(SyncError):
    """Persistence read, write or delete failed."""

    title = "Storage error"


class ValidationError(SyncError):
    """A required form field is empty."""

    title = "Invalid input"
