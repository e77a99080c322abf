from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CaptureEventInput:
    user_id: int
    uri: str
    is_write: bool
    language: str | None = None
    line_number: int | None = None
    cursor_pos: int | None = None


@dataclass(frozen=True)
class CaptureEventOutput:
    success: bool
    event_id: int
