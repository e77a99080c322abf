from __future__ import annotations

from cairos.application.dto.events import CaptureEventInput, CaptureEventOutput
from cairos.application.ports.events_port import EventsPort

from .auth_common import utcnow


class CaptureEventUseCase:
    def __init__(self, *, events_port: EventsPort):
        self._events_port = events_port

    def execute(self, command: CaptureEventInput) -> CaptureEventOutput:
        uri = command.uri.strip()
        if not uri:
            raise ValueError("uri is required.")

        event = self._events_port.create_event(
            user_id=command.user_id,
            uri=uri,
            is_write=command.is_write,
            language=command.language,
            line_number=command.line_number,
            cursor_pos=command.cursor_pos,
            created_at=utcnow(),
        )
        return CaptureEventOutput(success=True, event_id=event.id)
