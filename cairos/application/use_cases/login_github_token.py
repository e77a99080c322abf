from __future__ import annotations

from cairos.application.dto.auth import LoginGithubTokenInput, SessionTokenOutput
from cairos.application.ports.auth_port import AuthPort
from cairos.application.ports.github_oauth_port import GithubOauthPort
from cairos.application.ports.token_port import TokenPort
from cairos.domain.exceptions import UnauthenticatedError

from .auth_common import issue_session_token, resolve_github_identity


class LoginGithubTokenUseCase:
    """Exchange a GitHub access token obtained by a client for a session token."""

    def __init__(
        self,
        *,
        auth_port: AuthPort,
        github_oauth_port: GithubOauthPort,
        token_port: TokenPort,
    ):
        self._auth_port = auth_port
        self._github_oauth_port = github_oauth_port
        self._token_port = token_port

    def execute(self, command: LoginGithubTokenInput) -> SessionTokenOutput:
        access_token = command.access_token.strip()
        if not access_token:
            raise UnauthenticatedError("Missing access token.")

        username, email = resolve_github_identity(
            github_oauth_port=self._github_oauth_port,
            access_token=access_token,
        )
        return issue_session_token(
            username=username,
            email=email,
            auth_port=self._auth_port,
            token_port=self._token_port,
        )
