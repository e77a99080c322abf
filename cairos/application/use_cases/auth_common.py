from __future__ import annotations

import logging
from datetime import datetime, timezone

from cairos.application.dto.auth import AuthUserOutput, SessionTokenOutput
from cairos.application.ports.auth_port import AuthPort
from cairos.application.ports.github_oauth_port import GithubOauthPort
from cairos.application.ports.token_port import TokenPort
from cairos.domain.entities.github import select_primary_email
from cairos.domain.entities.user import User
from cairos.domain.exceptions import NoPrimaryEmailError


logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def build_auth_user_output(user: User) -> AuthUserOutput:
    return AuthUserOutput(
        id=user.id,
        username=user.username,
        email=user.email,
    )


def resolve_github_identity(
    *,
    github_oauth_port: GithubOauthPort,
    access_token: str,
) -> tuple[str, str]:
    """Return ``(username, email)`` for a GitHub access token.

    The public profile email is used when present; otherwise the account's
    primary email is looked up.
    """
    profile = github_oauth_port.get_profile(access_token=access_token)
    email = profile.email.strip() if profile.email else ""
    if not email:
        emails = github_oauth_port.list_emails(access_token=access_token)
        email = select_primary_email(emails) or ""
    if not email:
        raise NoPrimaryEmailError("GitHub account has no primary email.")
    return profile.login, normalize_email(email)


def issue_session_token(
    *,
    username: str,
    email: str,
    auth_port: AuthPort,
    token_port: TokenPort,
) -> SessionTokenOutput:
    token = token_port.generate_session_token()

    def _tx(tx_port: AuthPort) -> SessionTokenOutput:
        now = utcnow()
        user = tx_port.upsert_user(username=username, email=email, now=now)
        tx_port.create_token(user_id=user.id, token=token, created_at=now)
        return SessionTokenOutput(user=build_auth_user_output(user), token=token)

    output = auth_port.execute_in_transaction(_tx)
    logger.info("auth: session_token_issued user_id=%s", output.user.id)
    return output
