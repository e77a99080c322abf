from __future__ import annotations

import logging

from fastapi import HTTPException

from cairos.core.auth import unauthorized
from cairos.domain.exceptions import (
    AuthorizationCodeRejectedError,
    AuthorizationNotGrantedError,
    DomainError,
    InvalidStateError,
    NoPrimaryEmailError,
    StorageError,
    UnauthenticatedError,
    UpstreamProtocolError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)


logger = logging.getLogger(__name__)

INTERNAL_ERROR_DETAIL = "Internal server error."

# Order matters: subclasses before their bases.
_HTTP_ERRORS: tuple[tuple[type[DomainError], int, str], ...] = (
    (UnauthenticatedError, 401, "Invalid token."),
    (InvalidStateError, 400, "Invalid OAuth state."),
    (AuthorizationCodeRejectedError, 400, "Authorization code rejected."),
    (AuthorizationNotGrantedError, 400, "Authorization was not granted."),
    (NoPrimaryEmailError, 422, "No primary email found on the GitHub account."),
    (UpstreamTimeoutError, 504, "Upstream request timed out."),
    (UpstreamUnavailableError, 502, "Upstream service unavailable."),
    (UpstreamProtocolError, 500, INTERNAL_ERROR_DETAIL),
    (StorageError, 500, INTERNAL_ERROR_DETAIL),
)


def http_exception_for(exc: DomainError, *, component: str) -> HTTPException:
    """Translate a domain error into an HTTP error without leaking its message."""
    status_code, detail = 500, INTERNAL_ERROR_DETAIL
    for error_type, error_status, error_detail in _HTTP_ERRORS:
        if isinstance(exc, error_type):
            status_code, detail = error_status, error_detail
            break

    if status_code >= 500:
        logger.error(
            "%s: %s status=%s detail=%s",
            component,
            type(exc).__name__,
            status_code,
            exc,
            exc_info=exc,
        )
    else:
        logger.warning(
            "%s: %s status=%s detail=%s",
            component,
            type(exc).__name__,
            status_code,
            exc,
        )

    if status_code == 401:
        return unauthorized(detail)
    return HTTPException(status_code=status_code, detail=detail)
