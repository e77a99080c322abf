from __future__ import annotations

from dataclasses import dataclass
import logging

import httpx

from cairos.application.ports.github_oauth_port import GithubOauthPort
from cairos.domain.entities.github import GithubEmail, GithubProfile
from cairos.domain.exceptions import (
    AuthorizationCodeRejectedError,
    ProviderTokenRejectedError,
    UpstreamProtocolError,
)
from cairos.infrastructure.clients.http import decode_json, send_request


logger = logging.getLogger(__name__)

GITHUB_API_ACCEPT = "application/vnd.github+json"


@dataclass(frozen=True)
class GithubOauthClientSettings:
    client_id: str
    client_secret: str
    redirect_url: str
    authorize_url: str = "https://github.com/login/oauth/authorize"
    token_url: str = "https://github.com/login/oauth/access_token"
    api_base: str = "https://api.github.com"
    scope: str = "user:email"


class GithubOauthClient(GithubOauthPort):
    def __init__(self, settings: GithubOauthClientSettings, *, http_client: httpx.Client):
        self._settings = settings
        self._http = http_client

    def build_authorize_url(self, *, state: str, code_challenge: str) -> str:
        url = httpx.URL(
            self._settings.authorize_url,
            params={
                "response_type": "code",
                "client_id": self._settings.client_id,
                "redirect_uri": self._settings.redirect_url,
                "scope": self._settings.scope,
                "state": state,
                "code_challenge": code_challenge,
                "code_challenge_method": "S256",
            },
        )
        return str(url)

    def exchange_code(self, *, code: str, code_verifier: str) -> str:
        response = send_request(
            self._http,
            "POST",
            self._settings.token_url,
            upstream="GitHub",
            headers={"Accept": "application/json"},
            data={
                "grant_type": "authorization_code",
                "client_id": self._settings.client_id,
                "client_secret": self._settings.client_secret,
                "code": code,
                "redirect_uri": self._settings.redirect_url,
                "code_verifier": code_verifier,
            },
        )
        payload = decode_json(response, upstream="GitHub")
        if not isinstance(payload, dict):
            raise UpstreamProtocolError("GitHub token response is not an object.")

        # GitHub reports exchange failures with a 200 and an ``error`` field.
        error = payload.get("error")
        if error:
            logger.warning(
                "github_oauth_client: code_exchange_rejected error=%s description=%s",
                error,
                payload.get("error_description"),
            )
            raise AuthorizationCodeRejectedError("GitHub rejected the authorization code.")

        access_token = payload.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            raise UpstreamProtocolError("GitHub token response has no access_token.")
        return access_token

    def get_profile(self, *, access_token: str) -> GithubProfile:
        payload = self._get_api(path="/user", access_token=access_token)
        if not isinstance(payload, dict):
            raise UpstreamProtocolError("GitHub user response is not an object.")

        login = payload.get("login")
        if not isinstance(login, str) or not login:
            raise UpstreamProtocolError("GitHub user response has no login.")

        email = payload.get("email")
        return GithubProfile(
            login=login,
            email=email if isinstance(email, str) else None,
        )

    def list_emails(self, *, access_token: str) -> list[GithubEmail]:
        payload = self._get_api(path="/user/emails", access_token=access_token)
        if not isinstance(payload, list):
            raise UpstreamProtocolError("GitHub emails response is not a list.")

        emails: list[GithubEmail] = []
        for item in payload:
            if not isinstance(item, dict):
                raise UpstreamProtocolError("GitHub emails response has a malformed entry.")
            email = item.get("email")
            if not isinstance(email, str):
                continue
            emails.append(
                GithubEmail(
                    email=email,
                    primary=bool(item.get("primary", False)),
                    verified=bool(item.get("verified", False)),
                )
            )
        return emails

    def _get_api(self, *, path: str, access_token: str):
        response = send_request(
            self._http,
            "GET",
            f"{self._settings.api_base.rstrip('/')}{path}",
            upstream="GitHub",
            headers={
                "Accept": GITHUB_API_ACCEPT,
                "Authorization": f"Bearer {access_token}",
            },
        )
        return decode_json(
            response,
            upstream="GitHub",
            unauthorized_error=ProviderTokenRejectedError,
        )
