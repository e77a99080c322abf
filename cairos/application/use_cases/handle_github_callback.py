from __future__ import annotations

from cairos.application.dto.auth import GithubCallbackInput, SessionTokenOutput
from cairos.application.ports.auth_port import AuthPort
from cairos.application.ports.csrf_ledger_port import CsrfLedgerPort
from cairos.application.ports.github_oauth_port import GithubOauthPort
from cairos.application.ports.token_port import TokenPort
from cairos.domain.exceptions import AuthorizationNotGrantedError, InvalidStateError

from .auth_common import issue_session_token, resolve_github_identity


class HandleGithubCallbackUseCase:
    def __init__(
        self,
        *,
        auth_port: AuthPort,
        csrf_ledger: CsrfLedgerPort,
        github_oauth_port: GithubOauthPort,
        token_port: TokenPort,
    ):
        self._auth_port = auth_port
        self._csrf_ledger = csrf_ledger
        self._github_oauth_port = github_oauth_port
        self._token_port = token_port

    def execute(self, command: GithubCallbackInput) -> SessionTokenOutput:
        # Removed before any network call so a replayed state fails even if
        # the first exchange is still in flight.
        verifier = self._csrf_ledger.pop(state=command.state)
        if verifier is None:
            raise InvalidStateError("Unknown or already used OAuth state.")
        if command.error or not command.code:
            raise AuthorizationNotGrantedError(
                f"GitHub did not grant authorization: {command.error or 'missing code'}."
            )

        access_token = self._github_oauth_port.exchange_code(
            code=command.code,
            code_verifier=verifier,
        )
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
