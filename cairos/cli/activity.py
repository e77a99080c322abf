from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from cairos.domain.exceptions import DomainError


logger = logging.getLogger(__name__)

DEBOUNCE_WINDOW_SECONDS = 120.0


class EditorEventKind(str, Enum):
    OPENED = "opened"
    CHANGED = "changed"
    SAVED = "saved"


@dataclass(frozen=True)
class EditorEvent:
    kind: EditorEventKind
    uri: str
    language: str | None = None
    line_number: int | None = None
    cursor_pos: int | None = None

    @property
    def is_write(self) -> bool:
        return self.kind is EditorEventKind.SAVED

    @classmethod
    def opened(cls, uri: str, *, language: str | None = None) -> EditorEvent:
        return cls(kind=EditorEventKind.OPENED, uri=uri, language=language)

    @classmethod
    def changed(
        cls,
        uri: str,
        *,
        line_number: int | None = None,
        cursor_pos: int | None = None,
    ) -> EditorEvent:
        return cls(
            kind=EditorEventKind.CHANGED,
            uri=uri,
            line_number=line_number,
            cursor_pos=cursor_pos,
        )

    @classmethod
    def saved(cls, uri: str) -> EditorEvent:
        return cls(kind=EditorEventKind.SAVED, uri=uri)


@dataclass(frozen=True)
class CurrentFileState:
    uri: str | None = None
    last_sent_at: float = 0.0


class ActivityDebouncer:
    """Coalesces editor notifications into capture events.

    A non-write event for the file that was last forwarded is dropped while
    the window is open. Writes and file switches always go through. The lock
    only guards the decision and the stamp; sending happens outside it.
    """

    def __init__(
        self,
        *,
        send: Callable[[EditorEvent], None],
        window_seconds: float = DEBOUNCE_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        on_send_error: Callable[[DomainError], None] | None = None,
    ):
        self._send = send
        self._window_seconds = window_seconds
        self._clock = clock
        self._on_send_error = on_send_error
        self._lock = threading.Lock()
        self._current = CurrentFileState()

    @property
    def current(self) -> CurrentFileState:
        with self._lock:
            return self._current

    def should_forward(self, event: EditorEvent) -> bool:
        with self._lock:
            now = self._clock()
            current = self._current
            if (
                current.uri is not None
                and event.uri == current.uri
                and now - current.last_sent_at < self._window_seconds
                and not event.is_write
            ):
                return False
            self._current = CurrentFileState(uri=event.uri, last_sent_at=now)
            return True

    def handle(self, event: EditorEvent) -> bool:
        if not self.should_forward(event):
            logger.debug("activity: suppressed kind=%s uri=%s", event.kind.value, event.uri)
            return False
        try:
            self._send(event)
        except DomainError as exc:
            logger.warning(
                "activity: send_failed kind=%s uri=%s error=%s",
                event.kind.value,
                event.uri,
                exc,
            )
            if self._on_send_error is not None:
                self._on_send_error(exc)
        return True
