from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from cairos.api.deps import get_capture_event_use_case, get_current_user_id
from cairos.api.errors import http_exception_for
from cairos.api.schemas.events import CaptureEventRequest, CaptureEventResponse
from cairos.application.dto.events import CaptureEventInput
from cairos.application.use_cases.capture_event import CaptureEventUseCase
from cairos.domain.exceptions import DomainError


router = APIRouter()


async def read_capture_event_request(
    request: Request,
    current_user_id: int = Depends(get_current_user_id),
) -> CaptureEventRequest:
    # Declared as a dependency of the guard so the body is only read once the
    # caller is known.
    body = await request.body()
    try:
        return CaptureEventRequest.model_validate_json(body)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False)) from exc


@router.post(
    "/events/capture",
    response_model=CaptureEventResponse,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {"schema": CaptureEventRequest.model_json_schema()}
            },
        }
    },
)
def capture_event(
    current_user_id: int = Depends(get_current_user_id),
    req: CaptureEventRequest = Depends(read_capture_event_request),
    use_case: CaptureEventUseCase = Depends(get_capture_event_use_case),
):
    try:
        output = use_case.execute(
            CaptureEventInput(
                user_id=current_user_id,
                uri=req.uri,
                is_write=req.is_write,
                language=req.language,
                line_number=req.line_number,
                cursor_pos=req.cursor_pos,
            )
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except DomainError as exc:
        raise http_exception_for(exc, component="events_router") from exc
    return CaptureEventResponse(success=output.success)
