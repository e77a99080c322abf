from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware

from cairos.api.middleware import RequestTimeoutMiddleware
from cairos.api.routers import events, github_auth, session
from cairos.core.db import create_schema, get_engine
from cairos.infrastructure.clients.http import build_http_client
from cairos.infrastructure.oauth.csrf_pkce_ledger import InMemoryCsrfPkceLedger
from cairos.shared.config import get_settings


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    app.state.csrf_ledger = InMemoryCsrfPkceLedger(ttl_seconds=settings.oauth_state_ttl_seconds)
    app.state.github_http_client = build_http_client(
        timeout_seconds=settings.github_timeout_seconds,
        user_agent=settings.http_user_agent,
    )
    if settings.postgres_dsn and settings.db_auto_create:
        create_schema(get_engine(settings.postgres_dsn))
        logger.info("main: schema_ready")

    try:
        yield
    finally:
        app.state.github_http_client.close()
        app.state.csrf_ledger.clear()
        if settings.postgres_dsn:
            get_engine(settings.postgres_dsn).dispose()
        logger.info("main: shutdown_complete")


app = FastAPI(title="Cairos API", lifespan=lifespan)
app.add_middleware(GZipMiddleware)
app.add_middleware(
    RequestTimeoutMiddleware,
    timeout_seconds=get_settings().request_timeout_seconds,
)

app.include_router(github_auth.router)
app.include_router(events.router)
app.include_router(session.router)
