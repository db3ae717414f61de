"""Transient user-facing banners (error, warning, success)"""

from enum import Enum
from typing import Dict, Optional

from transfer_desk.config import settings
from transfer_desk.utils.scheduler import Cancellable, Scheduler


class MessageKind(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    SUCCESS = "success"


class MessageBoard:
    """
    Holds at most one message per kind; each clears itself after `ttl_seconds`.

    Setting a kind again replaces its text and restarts that kind's clock.
    After close() all writes are ignored.
    """

    def __init__(self, scheduler: Scheduler, ttl_seconds: float | None = None):
        self._scheduler = scheduler
        self._ttl = ttl_seconds if ttl_seconds is not None else settings.message_ttl_seconds
        self._messages: Dict[MessageKind, str] = {}
        self._expiry: Dict[MessageKind, Cancellable] = {}
        self._closed = False

    @property
    def error(self) -> Optional[str]:
        return self._messages.get(MessageKind.ERROR)

    @property
    def warning(self) -> Optional[str]:
        return self._messages.get(MessageKind.WARNING)

    @property
    def success(self) -> Optional[str]:
        return self._messages.get(MessageKind.SUCCESS)

    def show(self, kind: MessageKind, text: str) -> None:
        if self._closed:
            return
        self._cancel_expiry(kind)
        self._messages[kind] = text
        self._expiry[kind] = self._scheduler.call_later(self._ttl, lambda: self._expire(kind))

    def show_error(self, text: str) -> None:
        self.show(MessageKind.ERROR, text)

    def show_warning(self, text: str) -> None:
        self.show(MessageKind.WARNING, text)

    def show_success(self, text: str) -> None:
        self.show(MessageKind.SUCCESS, text)

    def clear(self) -> None:
        for kind in list(self._expiry):
            self._cancel_expiry(kind)
        self._messages.clear()

    def close(self) -> None:
        self.clear()
        self._closed = True

    def _expire(self, kind: MessageKind) -> None:
        self._expiry.pop(kind, None)
        self._messages.pop(kind, None)

    def _cancel_expiry(self, kind: MessageKind) -> None:
        handle = self._expiry.pop(kind, None)
        if handle is not None:
            handle.cancel()
