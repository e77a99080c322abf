from __future__ import annotations

from typing import Any, Mapping

from cairos.domain.entities.event import Event


def _as_int_or_none(value: Any) -> int | None:
    return int(value) if value is not None else None


def map_row_to_event(row: Mapping[str, Any]) -> Event:
    return Event(
        id=int(row["id"]),
        user_id=int(row["user_id"]),
        uri=row["uri"],
        is_write=bool(row["is_write"]),
        language=row.get("language"),
        line_number=_as_int_or_none(row.get("line_number")),
        cursor_pos=_as_int_or_none(row.get("cursor_pos")),
        created_at=row["created_at"],
    )
