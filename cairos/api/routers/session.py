from __future__ import annotations

import html

from fastapi import APIRouter, Depends, Response
from fastapi.responses import HTMLResponse

from cairos.api.deps import get_accounts_repository, get_session_user_id
from cairos.api.errors import http_exception_for
from cairos.domain.exceptions import DomainError
from cairos.infrastructure.db.repositories.accounts_repository import SqlAccountsRepository


router = APIRouter()


@router.get("/", response_class=HTMLResponse)
def welcome(
    user_id: int = Depends(get_session_user_id),
    accounts: SqlAccountsRepository = Depends(get_accounts_repository),
):
    try:
        user = accounts.get_user_by_id(user_id=user_id)
    except DomainError as exc:
        raise http_exception_for(exc, component="session_router") from exc
    name = html.escape(user.username) if user is not None else "there"
    return HTMLResponse(f"<h1>Welcome, {name}!</h1><p>You are logged in.</p>")


@router.get("/heartbeat", status_code=204)
def heartbeat(user_id: int = Depends(get_session_user_id)):
    _ = user_id
    return Response(status_code=204)


@router.get("/healthz")
def healthz():
    return {"status": "ok"}
