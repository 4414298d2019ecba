"""Contract between FavoritesSync and the presentation layer."""

from abc import ABC, abstractmethod

import structlog

from src.errors import SyncError

log = structlog.stdlib.get_logger()


class Presenter(ABC):
    """Receives user-visible notices and answers yes/no questions.

    Rendering is entirely up to the implementation.
    """

    @abstractmethod
    def show_error(self, error: SyncError) -> None:
        """Show a non-fatal error notice."""
        pass

    @abstractmethod
    def show_success(self, title: str, message: str) -> None:
        """Show a success notice."""
        pass

    @abstractmethod
    async def confirm(self, title: str, message: str) -> bool:
        """Ask the user a yes/no question. Returns True on yes."""
        pass


class LoggingPresenter(Presenter):
    """Presenter for headless use: notices go to the log.

    Confirmations are answered with a fixed decision.
    """

    def __init__(self, auto_confirm: bool = False):
        self._auto_confirm = auto_confirm

    def show_error(self, error: SyncError) -> None:
        log.warning("user_notice_error", title=error.title, message=error.message)

    def show_success(self, title: str, message: str) -> None:
        log.info("user_notice_success", title=title, message=message)

    async def confirm(self, title: str, message: str) -> bool:
        log.info("user_confirmation", title=title, message=message, answer=self._auto_confirm)
        return self._auto_confirm
