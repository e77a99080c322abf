from __future__ import annotations

import logging
from threading import Lock
import time
from typing import Callable

from cairos.application.ports.csrf_ledger_port import CsrfLedgerPort


logger = logging.getLogger(__name__)


class InMemoryCsrfPkceLedger(CsrfLedgerPort):
    """Single-use ``state -> PKCE verifier`` map held in process memory.

    Losing the ledger on restart only forces an in-progress login to start over.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = 600,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, str]] = {}
        self._lock = Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, state: object) -> bool:
        with self._lock:
            return state in self._entries

    def put(self, *, state: str, verifier: str) -> None:
        now = self._clock()
        with self._lock:
            self._purge_expired(now)
            self._entries[state] = (now + self._ttl_seconds, verifier)

    def pop(self, *, state: str) -> str | None:
        now = self._clock()
        with self._lock:
            entry = self._entries.pop(state, None)
        if entry is None:
            return None
        expires_at, verifier = entry
        if expires_at <= now:
            logger.info("csrf_pkce_ledger: expired_state_rejected")
            return None
        return verifier

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _purge_expired(self, now: float) -> None:
        expired = [state for state, (expires_at, _) in self._entries.items() if expires_at <= now]
        for state in expired:
            del self._entries[state]
        if expired:
            logger.debug("csrf_pkce_ledger: purged_expired count=%s", len(expired))
