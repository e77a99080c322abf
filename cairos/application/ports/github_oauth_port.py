from __future__ import annotations

from typing import Protocol

from cairos.domain.entities.github import GithubEmail, GithubProfile


class GithubOauthPort(Protocol):
    def build_authorize_url(self, *, state: str, code_challenge: str) -> str:
        ...

    def exchange_code(self, *, code: str, code_verifier: str) -> str:
        ...

    def get_profile(self, *, access_token: str) -> GithubProfile:
        ...

    def list_emails(self, *, access_token: str) -> list[GithubEmail]:
        ...
