from __future__ import annotations

import base64
import hashlib
import secrets

from cairos.application.dto.auth import PkcePair
from cairos.application.ports.token_port import TokenPort


SESSION_TOKEN_BYTES = 32
CSRF_STATE_BYTES = 16
PKCE_VERIFIER_BYTES = 64


def pkce_challenge_for(verifier: str) -> str:
    digest = hashlib.sha256(verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


class OpaqueTokenService(TokenPort):
    def generate_session_token(self) -> str:
        return secrets.token_hex(SESSION_TOKEN_BYTES)

    def generate_csrf_state(self) -> str:
        return secrets.token_urlsafe(CSRF_STATE_BYTES)

    def generate_pkce_pair(self) -> PkcePair:
        verifier = secrets.token_urlsafe(PKCE_VERIFIER_BYTES)
        return PkcePair(verifier=verifier, challenge=pkce_challenge_for(verifier))
