from __future__ import annotations

from datetime import datetime
from typing import Protocol

from cairos.domain.entities.event import Event


class EventsPort(Protocol):
    def create_event(
        self,
        *,
        user_id: int,
        uri: str,
        is_write: bool,
        language: str | None,
        line_number: int | None,
        cursor_pos: int | None,
        created_at: datetime,
    ) -> Event:
        ...
