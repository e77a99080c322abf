from __future__ import annotations

from fastapi import APIRouter, Cookie, Depends
from fastapi.responses import RedirectResponse

from cairos.api.deps import (
    get_begin_github_authorization_use_case,
    get_handle_github_callback_use_case,
    get_login_github_token_use_case,
    get_logout_token_use_case,
)
from cairos.api.errors import http_exception_for
from cairos.api.schemas.auth import LoginRequest, LoginResponse, LogoutResponse
from cairos.application.dto.auth import (
    GithubCallbackInput,
    LoginGithubTokenInput,
    LogoutTokenInput,
)
from cairos.application.use_cases.begin_github_authorization import (
    BeginGithubAuthorizationUseCase,
)
from cairos.application.use_cases.handle_github_callback import HandleGithubCallbackUseCase
from cairos.application.use_cases.login_github_token import LoginGithubTokenUseCase
from cairos.application.use_cases.logout_token import LogoutTokenUseCase
from cairos.core.auth import SESSION_COOKIE_NAME, require_bearer_token
from cairos.domain.exceptions import DomainError
from cairos.shared.config import get_settings


router = APIRouter()


def _set_session_cookie(response: RedirectResponse, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
        max_age=settings.session_cookie_max_age_days * 24 * 60 * 60,
        path="/",
    )


@router.get("/auth/github")
def github_authorize(
    use_case: BeginGithubAuthorizationUseCase = Depends(get_begin_github_authorization_use_case),
):
    output = use_case.execute()
    return RedirectResponse(output.url, status_code=307)


@router.get("/auth/github/callback")
def github_callback(
    state: str,
    code: str | None = None,
    error: str | None = None,
    use_case: HandleGithubCallbackUseCase = Depends(get_handle_github_callback_use_case),
):
    # The state is consumed even when the provider reports an error.
    try:
        output = use_case.execute(GithubCallbackInput(state=state, code=code, error=error))
    except DomainError as exc:
        raise http_exception_for(exc, component="github_auth_router") from exc

    response = RedirectResponse(get_settings().post_login_redirect, status_code=303)
    _set_session_cookie(response, output.token)
    return response


@router.post("/auth/login", response_model=LoginResponse)
def login(
    req: LoginRequest,
    use_case: LoginGithubTokenUseCase = Depends(get_login_github_token_use_case),
):
    try:
        output = use_case.execute(LoginGithubTokenInput(access_token=req.access_token))
    except DomainError as exc:
        raise http_exception_for(exc, component="github_auth_router") from exc
    return LoginResponse(token=output.token)


@router.post("/auth/logout", response_model=LogoutResponse)
def logout(
    token: str = Depends(require_bearer_token),
    use_case: LogoutTokenUseCase = Depends(get_logout_token_use_case),
):
    try:
        use_case.execute(LogoutTokenInput(token=token))
    except DomainError as exc:
        raise http_exception_for(exc, component="github_auth_router") from exc
    # Unknown and already disabled tokens get the same answer.
    return LogoutResponse(success=True)


@router.get("/auth/logout")
def logout_session(
    session_token: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME),
    use_case: LogoutTokenUseCase = Depends(get_logout_token_use_case),
):
    if session_token:
        try:
            use_case.execute(LogoutTokenInput(token=session_token))
        except DomainError as exc:
            raise http_exception_for(exc, component="github_auth_router") from exc
    response = RedirectResponse("/", status_code=303)
    response.delete_cookie(key=SESSION_COOKIE_NAME, path="/")
    return response
