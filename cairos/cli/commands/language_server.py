from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from cairos.cli.activity import EditorEvent
from cairos.cli.clients.cairos_api import CairosApiClient
from cairos.cli.config import load_config
from cairos.cli.language_server import build_language_server
from cairos.cli.settings import ClientSettings
from cairos.domain.exceptions import UnauthenticatedError
from cairos.infrastructure.clients.http import build_http_client


logger = logging.getLogger(__name__)


def make_event_sender(api_client: CairosApiClient, token: str) -> Callable[[EditorEvent], None]:
    def send(event: EditorEvent) -> None:
        api_client.capture_event(
            token=token,
            uri=event.uri,
            is_write=event.is_write,
            language=event.language,
            line_number=event.line_number,
            cursor_pos=event.cursor_pos,
        )

    return send


def run_language_server(*, config_path: Path, settings: ClientSettings) -> int:
    config = load_config(config_path)
    if not config.token:
        raise UnauthenticatedError(
            "You are not authenticated. Run `cairos auth login --github` first."
        )

    with build_http_client(
        timeout_seconds=settings.http_timeout_seconds,
        user_agent=settings.http_user_agent,
    ) as http_client:
        api_client = CairosApiClient(base_url=config.base_url, http_client=http_client)
        server = build_language_server(send=make_event_sender(api_client, config.token))
        logger.info("language_server: starting base_url=%s", config.base_url)
        server.start_io()
    return 0
