from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Event:
    id: int
    user_id: int
    uri: str
    is_write: bool
    language: str | None
    line_number: int | None
    cursor_pos: int | None
    created_at: datetime
