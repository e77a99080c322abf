from __future__ import annotations

import logging

from cairos.application.dto.auth import LogoutTokenInput
from cairos.application.ports.auth_port import AuthPort

from .auth_common import utcnow


logger = logging.getLogger(__name__)


class LogoutTokenUseCase:
    def __init__(self, *, auth_port: AuthPort):
        self._auth_port = auth_port

    def execute(self, command: LogoutTokenInput) -> bool:
        token = command.token.strip()
        if not token:
            return False
        disabled = self._auth_port.disable_token(token=token, disabled_at=utcnow())
        logger.info("auth: logout disabled=%s", disabled)
        return disabled
