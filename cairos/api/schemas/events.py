from __future__ import annotations

from pydantic import BaseModel, Field


class CaptureEventRequest(BaseModel):
    uri: str = Field(..., min_length=1)
    is_write: bool
    language: str | None = None
    line_number: int | None = Field(default=None, ge=0)
    cursor_pos: int | None = Field(default=None, ge=0)


class CaptureEventResponse(BaseModel):
    success: bool
