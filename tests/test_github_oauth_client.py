from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

import httpx
import pytest

from cairos.domain.exceptions import (
    AuthorizationCodeRejectedError,
    ProviderTokenRejectedError,
    UnauthenticatedError,
    UpstreamProtocolError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)
from cairos.infrastructure.clients.github_oauth_client import (
    GithubOauthClient,
    GithubOauthClientSettings,
)


def _make_client(handler) -> GithubOauthClient:
    return GithubOauthClient(
        GithubOauthClientSettings(
            client_id="client-id",
            client_secret="client-secret",
            redirect_url="http://localhost:3000/auth/github/callback",
        ),
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


def _unused(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected request {request.url}")


def test_build_authorize_url_carries_state_and_pkce():
    client = _make_client(_unused)

    url = client.build_authorize_url(state="state-1", code_challenge="challenge-1")

    query = parse_qs(urlsplit(url).query)
    assert url.startswith("https://github.com/login/oauth/authorize?")
    assert query["response_type"] == ["code"]
    assert query["client_id"] == ["client-id"]
    assert query["state"] == ["state-1"]
    assert query["code_challenge"] == ["challenge-1"]
    assert query["code_challenge_method"] == ["S256"]
    assert query["redirect_uri"] == ["http://localhost:3000/auth/github/callback"]


def test_exchange_code_sends_verifier():
    seen: dict[str, list[str]] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(parse_qs(request.content.decode()))
        return httpx.Response(200, json={"access_token": "gh-token", "token_type": "bearer"})

    client = _make_client(handler)

    assert client.exchange_code(code="code-1", code_verifier="verifier-1") == "gh-token"
    assert seen["code"] == ["code-1"]
    assert seen["code_verifier"] == ["verifier-1"]
    assert seen["client_secret"] == ["client-secret"]


def test_exchange_code_error_payload_is_rejection():
    client = _make_client(
        lambda request: httpx.Response(200, json={"error": "bad_verification_code"})
    )

    with pytest.raises(AuthorizationCodeRejectedError):
        client.exchange_code(code="code-1", code_verifier="verifier-1")


def test_profile_and_emails_are_parsed():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Authorization"] == "Bearer gh-token"
        if request.url.path == "/user":
            return httpx.Response(200, json={"login": "octocat", "email": None})
        return httpx.Response(
            200,
            json=[
                {"email": "a@example.com", "primary": False, "verified": True},
                {"email": "b@example.com", "primary": True, "verified": True},
            ],
        )

    client = _make_client(handler)

    profile = client.get_profile(access_token="gh-token")
    emails = client.list_emails(access_token="gh-token")

    assert profile.login == "octocat"
    assert profile.email is None
    assert [email.email for email in emails if email.primary] == ["b@example.com"]


def test_rejected_access_token_is_unauthenticated():
    client = _make_client(lambda request: httpx.Response(401, json={"message": "Bad credentials"}))

    with pytest.raises(ProviderTokenRejectedError) as exc_info:
        client.get_profile(access_token="revoked")
    assert isinstance(exc_info.value, UnauthenticatedError)


def test_malformed_profile_is_protocol_error():
    client = _make_client(lambda request: httpx.Response(200, content=b"not json"))

    with pytest.raises(UpstreamProtocolError):
        client.get_profile(access_token="gh-token")


def test_transport_failures_map_to_upstream_errors():
    def refused(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    def slow(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    with pytest.raises(UpstreamUnavailableError):
        _make_client(refused).list_emails(access_token="gh-token")
    with pytest.raises(UpstreamTimeoutError):
        _make_client(slow).get_profile(access_token="gh-token")
    with pytest.raises(UpstreamUnavailableError):
        _make_client(lambda request: httpx.Response(502)).get_profile(access_token="gh-token")
