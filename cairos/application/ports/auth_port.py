from __future__ import annotations

from datetime import datetime
from typing import Callable, Protocol, TypeVar

from cairos.domain.entities.user import AuthToken, User


TAuthResult = TypeVar("TAuthResult")


class AuthPort(Protocol):
    def execute_in_transaction(self, fn: Callable[[AuthPort], TAuthResult]) -> TAuthResult:
        ...

    def get_user_by_id(self, *, user_id: int) -> User | None:
        ...

    def upsert_user(self, *, username: str, email: str, now: datetime) -> User:
        ...

    def create_token(self, *, user_id: int, token: str, created_at: datetime) -> AuthToken:
        ...

    def find_user_id_by_token(self, *, token: str) -> int | None:
        ...

    def disable_token(self, *, token: str, disabled_at: datetime) -> bool:
        ...
