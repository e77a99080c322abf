from __future__ import annotations

from functools import lru_cache

from fastapi import Cookie, Depends, HTTPException, Request

from cairos.application.ports.csrf_ledger_port import CsrfLedgerPort
from cairos.application.use_cases.begin_github_authorization import (
    BeginGithubAuthorizationUseCase,
)
from cairos.application.use_cases.capture_event import CaptureEventUseCase
from cairos.application.use_cases.handle_github_callback import HandleGithubCallbackUseCase
from cairos.application.use_cases.login_github_token import LoginGithubTokenUseCase
from cairos.application.use_cases.logout_token import LogoutTokenUseCase
from cairos.application.use_cases.resolve_bearer_token import ResolveBearerTokenUseCase
from cairos.core.auth import SESSION_COOKIE_NAME, require_bearer_token, unauthorized
from cairos.core.db import get_engine
from cairos.domain.exceptions import DomainError, UnauthenticatedError
from cairos.infrastructure.clients.github_oauth_client import (
    GithubOauthClient,
    GithubOauthClientSettings,
)
from cairos.infrastructure.db.repositories.accounts_repository import SqlAccountsRepository
from cairos.infrastructure.db.repositories.events_repository import SqlEventsRepository
from cairos.infrastructure.security.token_service import OpaqueTokenService
from cairos.shared.config import get_settings

from .errors import http_exception_for


def get_db_engine():
    settings = get_settings()
    if not settings.postgres_dsn:
        raise HTTPException(status_code=500, detail="POSTGRES_DSN is required.")
    return get_engine(settings.postgres_dsn)


def get_accounts_repository(engine=Depends(get_db_engine)) -> SqlAccountsRepository:
    return SqlAccountsRepository(engine)


def get_events_repository(engine=Depends(get_db_engine)) -> SqlEventsRepository:
    return SqlEventsRepository(engine)


@lru_cache(maxsize=1)
def _get_token_service() -> OpaqueTokenService:
    return OpaqueTokenService()


def get_csrf_ledger(request: Request) -> CsrfLedgerPort:
    return request.app.state.csrf_ledger


def get_github_oauth_client(request: Request) -> GithubOauthClient:
    settings = get_settings()
    if not settings.github_client_id:
        raise HTTPException(status_code=500, detail="GITHUB_CLIENT_ID is required.")
    if not settings.github_client_secret:
        raise HTTPException(status_code=500, detail="GITHUB_CLIENT_SECRET is required.")
    return GithubOauthClient(
        GithubOauthClientSettings(
            client_id=settings.github_client_id,
            client_secret=settings.github_client_secret,
            redirect_url=settings.github_redirect_url,
            authorize_url=settings.github_authorize_url,
            token_url=settings.github_token_url,
            api_base=settings.github_api_base,
        ),
        http_client=request.app.state.github_http_client,
    )


def get_begin_github_authorization_use_case(
    csrf_ledger: CsrfLedgerPort = Depends(get_csrf_ledger),
    github_oauth_client: GithubOauthClient = Depends(get_github_oauth_client),
) -> BeginGithubAuthorizationUseCase:
    return BeginGithubAuthorizationUseCase(
        csrf_ledger=csrf_ledger,
        github_oauth_port=github_oauth_client,
        token_port=_get_token_service(),
    )


def get_handle_github_callback_use_case(
    accounts: SqlAccountsRepository = Depends(get_accounts_repository),
    csrf_ledger: CsrfLedgerPort = Depends(get_csrf_ledger),
    github_oauth_client: GithubOauthClient = Depends(get_github_oauth_client),
) -> HandleGithubCallbackUseCase:
    return HandleGithubCallbackUseCase(
        auth_port=accounts,
        csrf_ledger=csrf_ledger,
        github_oauth_port=github_oauth_client,
        token_port=_get_token_service(),
    )


def get_login_github_token_use_case(
    accounts: SqlAccountsRepository = Depends(get_accounts_repository),
    github_oauth_client: GithubOauthClient = Depends(get_github_oauth_client),
) -> LoginGithubTokenUseCase:
    return LoginGithubTokenUseCase(
        auth_port=accounts,
        github_oauth_port=github_oauth_client,
        token_port=_get_token_service(),
    )


def get_logout_token_use_case(
    accounts: SqlAccountsRepository = Depends(get_accounts_repository),
) -> LogoutTokenUseCase:
    return LogoutTokenUseCase(auth_port=accounts)


def get_resolve_bearer_token_use_case(
    accounts: SqlAccountsRepository = Depends(get_accounts_repository),
) -> ResolveBearerTokenUseCase:
    return ResolveBearerTokenUseCase(auth_port=accounts)


def get_capture_event_use_case(
    events: SqlEventsRepository = Depends(get_events_repository),
) -> CaptureEventUseCase:
    return CaptureEventUseCase(events_port=events)


def _resolve_user_id(use_case: ResolveBearerTokenUseCase, token: str, *, component: str) -> int:
    try:
        return use_case.execute(token=token)
    except UnauthenticatedError as exc:
        raise unauthorized("Invalid token.") from exc
    except DomainError as exc:
        raise http_exception_for(exc, component=component) from exc


def get_current_user_id(
    token: str = Depends(require_bearer_token),
    use_case: ResolveBearerTokenUseCase = Depends(get_resolve_bearer_token_use_case),
) -> int:
    """Sole source of the caller's identity for bearer-protected routes."""
    return _resolve_user_id(use_case, token, component="auth_guard")


def get_session_user_id(
    session_token: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME),
    use_case: ResolveBearerTokenUseCase = Depends(get_resolve_bearer_token_use_case),
) -> int:
    if not session_token:
        raise unauthorized("You need to login to access this page.")
    return _resolve_user_id(use_case, session_token, component="session_guard")
