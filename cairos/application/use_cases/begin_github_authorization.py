from __future__ import annotations

from cairos.application.dto.auth import AuthorizationRedirectOutput
from cairos.application.ports.csrf_ledger_port import CsrfLedgerPort
from cairos.application.ports.github_oauth_port import GithubOauthPort
from cairos.application.ports.token_port import TokenPort


class BeginGithubAuthorizationUseCase:
    def __init__(
        self,
        *,
        csrf_ledger: CsrfLedgerPort,
        github_oauth_port: GithubOauthPort,
        token_port: TokenPort,
    ):
        self._csrf_ledger = csrf_ledger
        self._github_oauth_port = github_oauth_port
        self._token_port = token_port

    def execute(self) -> AuthorizationRedirectOutput:
        pkce = self._token_port.generate_pkce_pair()
        state = self._token_port.generate_csrf_state()
        url = self._github_oauth_port.build_authorize_url(
            state=state,
            code_challenge=pkce.challenge,
        )
        self._csrf_ledger.put(state=state, verifier=pkce.verifier)
        return AuthorizationRedirectOutput(url=url, state=state)
