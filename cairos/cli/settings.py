from __future__ import annotations

import os
from dataclasses import dataclass


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


@dataclass(frozen=True)
class ClientSettings:
    github_client_id: str
    github_device_code_url: str
    github_token_url: str
    http_timeout_seconds: float
    http_user_agent: str
    config_file: str
    log_level: str


def get_client_settings() -> ClientSettings:
    return ClientSettings(
        github_client_id=_env("CAIROS_GITHUB_CLIENT_ID", "Ov23lifzTXvNg6MaDMm8"),
        github_device_code_url=_env(
            "CAIROS_GITHUB_DEVICE_CODE_URL", "https://github.com/login/device/code"
        ),
        github_token_url=_env(
            "CAIROS_GITHUB_TOKEN_URL", "https://github.com/login/oauth/access_token"
        ),
        http_timeout_seconds=float(_env("CAIROS_HTTP_TIMEOUT_SECONDS", "10")),
        http_user_agent=_env("CAIROS_HTTP_USER_AGENT", "cairos-cli"),
        config_file=_env("CAIROS_CONFIG_FILE", ""),
        log_level=_env("CAIROS_LOG_LEVEL", "WARNING"),
    )
