from __future__ import annotations

from datetime import datetime

from sqlalchemy import bindparam, text

from cairos.application.ports.events_port import EventsPort
from cairos.infrastructure.db.mappers.events_mapper import map_row_to_event
from cairos.infrastructure.db.session import TIMESTAMP, SqlRepository


class SqlEventsRepository(SqlRepository, EventsPort):
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
    ):
        sql = (
            text(
                """
                INSERT INTO events (
                    uri, is_write, language, line_number, cursor_pos, user_id, created_at
                ) VALUES (
                    :uri, :is_write, :language, :line_number, :cursor_pos, :user_id, :created_at
                )
                RETURNING id, user_id, uri, is_write, language, line_number, cursor_pos, created_at
                """
            )
            .bindparams(bindparam("created_at", type_=TIMESTAMP))
            .columns(created_at=TIMESTAMP)
        )
        params = {
            "uri": uri,
            "is_write": is_write,
            "language": language,
            "line_number": line_number,
            "cursor_pos": cursor_pos,
            "user_id": user_id,
            "created_at": created_at,
        }
        with self._write() as conn:
            row = conn.execute(sql, params).mappings().one()
        return map_row_to_event(row)
