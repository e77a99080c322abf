from __future__ import annotations

from typing import Protocol


class CsrfLedgerPort(Protocol):
    def put(self, *, state: str, verifier: str) -> None:
        ...

    def pop(self, *, state: str) -> str | None:
        ...
