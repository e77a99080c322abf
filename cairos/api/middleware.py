from __future__ import annotations

import asyncio
import logging

from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send


logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_DETAIL = "Request timed out."


class RequestTimeoutMiddleware:
    """Answers 504 once a request outlives its budget.

    Sync handlers run in a worker thread that cannot be cancelled, so the
    request is left to finish in the background and whatever it sends
    afterwards is dropped.
    """

    def __init__(self, app: ASGIApp, *, timeout_seconds: float):
        self.app = app
        self.timeout_seconds = timeout_seconds
        self._abandoned: set[asyncio.Task] = set()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False
        timed_out = False

        async def guarded_send(message: Message) -> None:
            nonlocal response_started
            if timed_out:
                return
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        task = asyncio.create_task(self.app(scope, receive, guarded_send))
        try:
            done, _ = await asyncio.wait({task}, timeout=self.timeout_seconds)
        except asyncio.CancelledError:
            task.cancel()
            raise

        if done:
            task.result()
            return
        if response_started:
            # The status line is already on the wire.
            await task
            return

        timed_out = True
        self._abandoned.add(task)
        task.add_done_callback(self._collect)
        logger.warning(
            "request_timeout: method=%s path=%s timeout=%s",
            scope.get("method"),
            scope.get("path"),
            self.timeout_seconds,
        )
        response = JSONResponse(status_code=504, content={"detail": REQUEST_TIMEOUT_DETAIL})
        await response(scope, receive, send)

    def _collect(self, task: asyncio.Task) -> None:
        self._abandoned.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("request_timeout: abandoned_request_failed", exc_info=exc)
