from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import TextIO

from cairos.cli.clients.cairos_api import CairosApiClient
from cairos.cli.clients.github_device import DeviceSession, GithubDeviceClient
from cairos.cli.config import clear_token, load_config, store_token
from cairos.cli.device_flow import DeviceFlowPoller
from cairos.cli.settings import ClientSettings
from cairos.domain.exceptions import DomainError
from cairos.infrastructure.clients.http import build_http_client


logger = logging.getLogger(__name__)


def _print_user_code(session: DeviceSession, *, out: TextIO) -> None:
    print(f"Open {session.verification_uri} and enter the code: {session.user_code}", file=out)
    print("Waiting for authorization...", file=out, flush=True)


def run_login_github(
    *,
    config_path: Path,
    settings: ClientSettings,
    abort_event: threading.Event,
    out: TextIO,
) -> int:
    config = load_config(config_path)
    with build_http_client(
        timeout_seconds=settings.http_timeout_seconds,
        user_agent=settings.http_user_agent,
    ) as http_client:
        poller = DeviceFlowPoller(
            device_client=GithubDeviceClient(
                client_id=settings.github_client_id,
                http_client=http_client,
                device_code_url=settings.github_device_code_url,
                token_url=settings.github_token_url,
            ),
            backend=CairosApiClient(base_url=config.base_url, http_client=http_client),
            token_sink=lambda token: store_token(config_path, token),
            on_user_code=lambda session: _print_user_code(session, out=out),
            abort_event=abort_event,
        )
        poller.run()
    print("Logged in successfully.", file=out)
    return 0


def run_logout(*, config_path: Path, settings: ClientSettings, out: TextIO) -> int:
    config = load_config(config_path)
    if not config.token:
        print("Not logged in.", file=out)
        return 0

    with build_http_client(
        timeout_seconds=settings.http_timeout_seconds,
        user_agent=settings.http_user_agent,
    ) as http_client:
        api_client = CairosApiClient(base_url=config.base_url, http_client=http_client)
        try:
            api_client.logout(token=config.token)
        except DomainError as exc:
            # The local token is cleared either way.
            logger.warning("auth: remote_logout_failed error=%s", exc)
            print(f"Could not revoke the token on the server: {exc}", file=out)

    clear_token(config_path)
    print("Logged out.", file=out)
    return 0
