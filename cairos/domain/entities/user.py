from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class User:
    id: int
    username: str
    email: str
    created_at: datetime


@dataclass(frozen=True)
class AuthToken:
    id: int
    user_id: int
    token: str
    created_at: datetime
    disabled_at: datetime | None

    @property
    def is_active(self) -> bool:
        return self.disabled_at is None
