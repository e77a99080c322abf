from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

import httpx

from cairos.domain.exceptions import UpstreamProtocolError, UpstreamUnavailableError
from cairos.infrastructure.clients.http import decode_json, send_request


logger = logging.getLogger(__name__)

DEVICE_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:device_code"
DEVICE_SCOPE = "read:user user:email"
UPSTREAM = "GitHub"


@dataclass(frozen=True)
class DeviceSession:
    device_code: str
    user_code: str
    verification_uri: str
    expires_in: int
    interval: int


class DevicePollStatus(str, Enum):
    AUTHORIZED = "authorized"
    PENDING = "pending"
    SLOW_DOWN = "slow_down"
    EXPIRED = "expired"
    DENIED = "denied"


@dataclass(frozen=True)
class DevicePollResult:
    status: DevicePollStatus
    access_token: str | None = None
    error: str | None = None
    interval: int | None = None


_ERROR_STATUSES = {
    "authorization_pending": DevicePollStatus.PENDING,
    "slow_down": DevicePollStatus.SLOW_DOWN,
    "expired_token": DevicePollStatus.EXPIRED,
}


class GithubDeviceClient:
    def __init__(
        self,
        *,
        client_id: str,
        http_client: httpx.Client,
        device_code_url: str = "https://github.com/login/device/code",
        token_url: str = "https://github.com/login/oauth/access_token",
        scope: str = DEVICE_SCOPE,
    ):
        self._client_id = client_id
        self._http_client = http_client
        self._device_code_url = device_code_url
        self._token_url = token_url
        self._scope = scope

    def request_device_code(self) -> DeviceSession:
        response = send_request(
            self._http_client,
            "POST",
            self._device_code_url,
            upstream=UPSTREAM,
            headers={"Accept": "application/json"},
            data={"client_id": self._client_id, "scope": self._scope},
        )
        payload = decode_json(response, upstream=UPSTREAM)
        if not isinstance(payload, dict):
            raise UpstreamProtocolError("GitHub device code response is not an object.")
        try:
            return DeviceSession(
                device_code=str(payload["device_code"]),
                user_code=str(payload["user_code"]),
                verification_uri=str(payload["verification_uri"]),
                expires_in=int(payload["expires_in"]),
                interval=int(payload.get("interval", 5)),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise UpstreamProtocolError("GitHub device code response is incomplete.") from exc

    def poll_access_token(self, *, device_code: str) -> DevicePollResult:
        response = send_request(
            self._http_client,
            "POST",
            self._token_url,
            upstream=UPSTREAM,
            headers={"Accept": "application/json"},
            data={
                "client_id": self._client_id,
                "device_code": device_code,
                "grant_type": DEVICE_GRANT_TYPE,
            },
        )
        if response.status_code >= 500:
            raise UpstreamUnavailableError(f"GitHub returned status {response.status_code}.")
        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamProtocolError("GitHub returned invalid JSON.") from exc
        if not isinstance(payload, dict):
            raise UpstreamProtocolError("GitHub token response is not an object.")

        access_token = payload.get("access_token")
        if isinstance(access_token, str) and access_token:
            return DevicePollResult(status=DevicePollStatus.AUTHORIZED, access_token=access_token)

        error = payload.get("error")
        if not isinstance(error, str) or not error:
            raise UpstreamProtocolError("GitHub token response has neither token nor error.")
        interval = payload.get("interval")
        return DevicePollResult(
            status=_ERROR_STATUSES.get(error, DevicePollStatus.DENIED),
            error=error,
            interval=interval if isinstance(interval, int) else None,
        )
