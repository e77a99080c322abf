from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _bool(name: str, default: str) -> bool:
    return (_env(name, default) or "").strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    postgres_dsn: str
    db_auto_create: bool
    github_client_id: str
    github_client_secret: str
    github_redirect_url: str
    github_authorize_url: str
    github_token_url: str
    github_api_base: str
    github_timeout_seconds: float
    oauth_state_ttl_seconds: float
    request_timeout_seconds: float
    session_cookie_max_age_days: int
    session_cookie_secure: bool
    post_login_redirect: str
    http_user_agent: str
    log_level: str
    host: str
    port: int


def get_settings() -> Settings:
    return Settings(
        postgres_dsn=_env("POSTGRES_DSN", ""),
        db_auto_create=_bool("DB_AUTO_CREATE", "true"),
        github_client_id=_env("GITHUB_CLIENT_ID", ""),
        github_client_secret=_env("GITHUB_CLIENT_SECRET", ""),
        github_redirect_url=_env(
            "GITHUB_REDIRECT_URL", "http://0.0.0.0:3000/auth/github/callback"
        ),
        github_authorize_url=_env(
            "GITHUB_AUTHORIZE_URL", "https://github.com/login/oauth/authorize"
        ),
        github_token_url=_env("GITHUB_TOKEN_URL", "https://github.com/login/oauth/access_token"),
        github_api_base=_env("GITHUB_API_BASE", "https://api.github.com"),
        github_timeout_seconds=float(_env("GITHUB_TIMEOUT_SECONDS", "10")),
        oauth_state_ttl_seconds=float(_env("OAUTH_STATE_TTL_SECONDS", "600")),
        request_timeout_seconds=float(_env("REQUEST_TIMEOUT_SECONDS", "30")),
        session_cookie_max_age_days=int(_env("SESSION_COOKIE_MAX_AGE_DAYS", "7")),
        session_cookie_secure=_bool("SESSION_COOKIE_SECURE", "false"),
        post_login_redirect=_env("POST_LOGIN_REDIRECT", "/"),
        http_user_agent=_env("HTTP_USER_AGENT", "CAIROS/1.0.0"),
        log_level=_env("LOG_LEVEL", "INFO"),
        host=_env("HOST", "0.0.0.0"),
        port=int(_env("PORT", "3000")),
    )
