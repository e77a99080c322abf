from __future__ import annotations

from typing import Any

import httpx

from cairos.domain.exceptions import (
    UnauthenticatedError,
    UpstreamProtocolError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)


def build_http_client(*, timeout_seconds: float, user_agent: str) -> httpx.Client:
    return httpx.Client(
        timeout=httpx.Timeout(timeout_seconds),
        headers={"User-Agent": user_agent},
    )


def send_request(
    http_client: httpx.Client,
    method: str,
    url: str,
    *,
    upstream: str,
    **kwargs: Any,
) -> httpx.Response:
    try:
        return http_client.request(method, url, **kwargs)
    except httpx.TimeoutException as exc:
        raise UpstreamTimeoutError(f"{upstream} request timed out.") from exc
    except httpx.HTTPError as exc:
        raise UpstreamUnavailableError(f"{upstream} request failed.") from exc


def decode_json(
    response: httpx.Response,
    *,
    upstream: str,
    unauthorized_error: type[UnauthenticatedError] = UnauthenticatedError,
) -> Any:
    status = response.status_code
    if status == 401:
        raise unauthorized_error(f"{upstream} rejected the credential.")
    if status >= 500:
        raise UpstreamUnavailableError(f"{upstream} returned status {status}.")
    if status >= 400:
        raise UpstreamProtocolError(f"{upstream} returned status {status}.")
    try:
        return response.json()
    except ValueError as exc:
        raise UpstreamProtocolError(f"{upstream} returned invalid JSON.") from exc
