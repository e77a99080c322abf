from __future__ import annotations

import logging

import httpx

from cairos.domain.exceptions import UpstreamProtocolError
from cairos.infrastructure.clients.http import decode_json, send_request


logger = logging.getLogger(__name__)

UPSTREAM = "Cairos API"


class CairosApiClient:
    def __init__(self, *, base_url: str, http_client: httpx.Client):
        self._base_url = base_url.rstrip("/")
        self._http_client = http_client

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    def login(self, *, access_token: str) -> str:
        """Exchange a GitHub access token for a Cairos bearer token."""
        response = send_request(
            self._http_client,
            "POST",
            self._url("/auth/login"),
            upstream=UPSTREAM,
            json={"access_token": access_token},
        )
        payload = decode_json(response, upstream=UPSTREAM)
        token = payload.get("token") if isinstance(payload, dict) else None
        if not isinstance(token, str) or not token:
            raise UpstreamProtocolError("Cairos API login response has no token.")
        return token

    def capture_event(
        self,
        *,
        token: str,
        uri: str,
        is_write: bool,
        language: str | None = None,
        line_number: int | None = None,
        cursor_pos: int | None = None,
    ) -> None:
        response = send_request(
            self._http_client,
            "POST",
            self._url("/events/capture"),
            upstream=UPSTREAM,
            headers={"Authorization": f"Bearer {token}"},
            json={
                "uri": uri,
                "is_write": is_write,
                "language": language,
                "line_number": line_number,
                "cursor_pos": cursor_pos,
            },
        )
        payload = decode_json(response, upstream=UPSTREAM)
        if not isinstance(payload, dict) or payload.get("success") is not True:
            raise UpstreamProtocolError("Cairos API did not acknowledge the event.")
        logger.debug("cairos_api: event_captured uri=%s is_write=%s", uri, is_write)

    def logout(self, *, token: str) -> None:
        response = send_request(
            self._http_client,
            "POST",
            self._url("/auth/logout"),
            upstream=UPSTREAM,
            headers={"Authorization": f"Bearer {token}"},
        )
        decode_json(response, upstream=UPSTREAM)
