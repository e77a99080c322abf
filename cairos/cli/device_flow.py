"""OAuth2 device authorization grant, driven from the terminal.

The poller walks ``REQUESTED -> POLLING`` and ends in exactly one of
``AUTHORIZED``, ``EXPIRED``, ``DENIED``, ``ABORTED`` or ``FAILED``. Only a
granted code talks to the Cairos backend, and ``AUTHORIZED`` is reached once
the resulting token has been handed to the sink.
"""

from __future__ import annotations

import logging
import threading
import time
from enum import Enum
from typing import Callable, Protocol

from cairos.cli.clients.github_device import DevicePollResult, DevicePollStatus, DeviceSession
from cairos.domain.exceptions import (
    DeviceFlowAbortedError,
    DeviceFlowDeniedError,
    DeviceFlowExpiredError,
    UpstreamUnavailableError,
)


logger = logging.getLogger(__name__)

SLOW_DOWN_INCREMENT_SECONDS = 5
MIN_INTERVAL_SECONDS = 1


class DeviceFlowState(str, Enum):
    REQUESTED = "requested"
    POLLING = "polling"
    AUTHORIZED = "authorized"
    EXPIRED = "expired"
    DENIED = "denied"
    ABORTED = "aborted"
    FAILED = "failed"


class DeviceCodeClient(Protocol):
    def request_device_code(self) -> DeviceSession:
        ...

    def poll_access_token(self, *, device_code: str) -> DevicePollResult:
        ...


class BackendLogin(Protocol):
    def login(self, *, access_token: str) -> str:
        ...


class DeviceFlowPoller:
    def __init__(
        self,
        *,
        device_client: DeviceCodeClient,
        backend: BackendLogin,
        token_sink: Callable[[str], None],
        on_user_code: Callable[[DeviceSession], None],
        abort_event: threading.Event | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._device_client = device_client
        self._backend = backend
        self._token_sink = token_sink
        self._on_user_code = on_user_code
        self._abort_event = abort_event or threading.Event()
        self._clock = clock
        self.state = DeviceFlowState.REQUESTED

    def _transition(self, state: DeviceFlowState) -> None:
        logger.debug("device_flow: transition from=%s to=%s", self.state.value, state.value)
        self.state = state

    def _abort(self) -> DeviceFlowAbortedError:
        self._transition(DeviceFlowState.ABORTED)
        return DeviceFlowAbortedError("Device authorization was cancelled.")

    def _expire(self) -> DeviceFlowExpiredError:
        self._transition(DeviceFlowState.EXPIRED)
        return DeviceFlowExpiredError("The device code expired before it was authorized.")

    def _wait(self, interval: float, deadline: float) -> None:
        remaining = deadline - self._clock()
        if remaining <= 0:
            return
        if self._abort_event.wait(min(interval, remaining)):
            raise self._abort()

    def _poll(self, device_code: str) -> DevicePollResult:
        try:
            return self._device_client.poll_access_token(device_code=device_code)
        except UpstreamUnavailableError as exc:
            logger.warning("device_flow: poll_failed error=%s", exc)
            return DevicePollResult(status=DevicePollStatus.PENDING)
        except Exception:
            self._transition(DeviceFlowState.FAILED)
            raise

    def run(self) -> str:
        """Block until the device is authorized and return the Cairos token."""
        if self._abort_event.is_set():
            raise self._abort()

        started_at = self._clock()
        try:
            session = self._device_client.request_device_code()
        except Exception:
            self._transition(DeviceFlowState.FAILED)
            raise
        deadline = started_at + session.expires_in
        interval = max(session.interval, MIN_INTERVAL_SECONDS)
        self._on_user_code(session)
        self._transition(DeviceFlowState.POLLING)

        while True:
            if self._clock() >= deadline:
                raise self._expire()
            self._wait(interval, deadline)
            if self._clock() >= deadline:
                raise self._expire()

            result = self._poll(session.device_code)
            if self._abort_event.is_set():
                raise self._abort()
            if self._clock() >= deadline:
                raise self._expire()

            if result.status is DevicePollStatus.AUTHORIZED:
                break
            if result.status is DevicePollStatus.PENDING:
                continue
            if result.status is DevicePollStatus.SLOW_DOWN:
                interval = max(interval + SLOW_DOWN_INCREMENT_SECONDS, result.interval or 0)
                logger.info("device_flow: slow_down interval=%s", interval)
                continue
            if result.status is DevicePollStatus.EXPIRED:
                raise self._expire()
            self._transition(DeviceFlowState.DENIED)
            raise DeviceFlowDeniedError(f"Device authorization failed: {result.error}.")

        try:
            token = self._backend.login(access_token=result.access_token)
            self._token_sink(token)
        except Exception:
            self._transition(DeviceFlowState.FAILED)
            raise
        self._transition(DeviceFlowState.AUTHORIZED)
        logger.info("device_flow: authorized")
        return token
