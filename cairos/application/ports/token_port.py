from __future__ import annotations

from typing import Protocol

from cairos.application.dto.auth import PkcePair


class TokenPort(Protocol):
    def generate_session_token(self) -> str:
        ...

    def generate_csrf_state(self) -> str:
        ...

    def generate_pkce_pair(self) -> PkcePair:
        ...
