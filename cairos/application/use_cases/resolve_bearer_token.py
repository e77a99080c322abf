from __future__ import annotations

from cairos.application.ports.auth_port import AuthPort
from cairos.domain.exceptions import UnauthenticatedError


class ResolveBearerTokenUseCase:
    def __init__(self, *, auth_port: AuthPort):
        self._auth_port = auth_port

    def execute(self, *, token: str) -> int:
        token = token.strip()
        if not token:
            raise UnauthenticatedError("Missing token.")
        # Unknown and disabled tokens share one lookup and one error.
        user_id = self._auth_port.find_user_id_by_token(token=token)
        if user_id is None:
            raise UnauthenticatedError("Invalid token.")
        return user_id
