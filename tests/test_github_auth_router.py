from __future__ import annotations

from fastapi.testclient import TestClient

from cairos.api.deps import (
    get_begin_github_authorization_use_case,
    get_handle_github_callback_use_case,
    get_login_github_token_use_case,
    get_logout_token_use_case,
)
from cairos.application.dto.auth import (
    AuthorizationRedirectOutput,
    AuthUserOutput,
    SessionTokenOutput,
)
from cairos.application.use_cases.handle_github_callback import HandleGithubCallbackUseCase
from cairos.domain.exceptions import (
    InvalidStateError,
    NoPrimaryEmailError,
    ProviderTokenRejectedError,
    UpstreamUnavailableError,
)
from cairos.infrastructure.oauth.csrf_pkce_ledger import InMemoryCsrfPkceLedger
from cairos.main import app
from tests.support import FakeAuthPort, FakeGithubOauthPort, FakeTokenPort


class FakeBeginUseCase:
    def execute(self):
        return AuthorizationRedirectOutput(
            url="https://github.com/login/oauth/authorize?state=s1",
            state="s1",
        )


class FakeSessionUseCase:
    def __init__(self, *, error: Exception | None = None):
        self.error = error
        self.commands = []

    def execute(self, command):
        self.commands.append(command)
        if self.error is not None:
            raise self.error
        return SessionTokenOutput(
            user=AuthUserOutput(id=1, username="octocat", email="octocat@example.com"),
            token="session-token",
        )


class FakeLogoutUseCase:
    def __init__(self):
        self.tokens: list[str] = []

    def execute(self, command) -> bool:
        self.tokens.append(command.token)
        return True


def test_authorize_redirects_to_github():
    app.dependency_overrides[get_begin_github_authorization_use_case] = lambda: FakeBeginUseCase()
    client = TestClient(app)

    response = client.get("/auth/github", follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"] == "https://github.com/login/oauth/authorize?state=s1"

    app.dependency_overrides.clear()


def test_callback_sets_session_cookie():
    use_case = FakeSessionUseCase()
    app.dependency_overrides[get_handle_github_callback_use_case] = lambda: use_case
    client = TestClient(app)

    response = client.get(
        "/auth/github/callback",
        params={"state": "s1", "code": "c1"},
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/"
    assert "session_token=session-token" in response.headers["set-cookie"]
    assert "httponly" in response.headers["set-cookie"].lower()
    assert use_case.commands[0].state == "s1"

    app.dependency_overrides.clear()


def test_callback_with_provider_error_is_bad_request():
    ledger = InMemoryCsrfPkceLedger()
    ledger.put(state="s1", verifier="v1")
    github = FakeGithubOauthPort()
    use_case = HandleGithubCallbackUseCase(
        auth_port=FakeAuthPort(),
        csrf_ledger=ledger,
        github_oauth_port=github,
        token_port=FakeTokenPort(),
    )
    app.dependency_overrides[get_handle_github_callback_use_case] = lambda: use_case
    client = TestClient(app)

    response = client.get(
        "/auth/github/callback",
        params={"state": "s1", "error": "access_denied"},
        follow_redirects=False,
    )
    replay = client.get(
        "/auth/github/callback",
        params={"state": "s1", "code": "c1"},
        follow_redirects=False,
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Authorization was not granted."
    assert "s1" not in ledger
    assert replay.status_code == 400
    assert replay.json()["detail"] == "Invalid OAuth state."
    assert github.exchanged == []

    app.dependency_overrides.clear()


def test_callback_with_replayed_state_is_bad_request():
    app.dependency_overrides[get_handle_github_callback_use_case] = lambda: FakeSessionUseCase(
        error=InvalidStateError("Unknown or already used OAuth state.")
    )
    client = TestClient(app)

    response = client.get(
        "/auth/github/callback",
        params={"state": "s1", "code": "c1"},
        follow_redirects=False,
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid OAuth state."
    assert "set-cookie" not in response.headers

    app.dependency_overrides.clear()


def test_login_returns_token():
    app.dependency_overrides[get_login_github_token_use_case] = lambda: FakeSessionUseCase()
    client = TestClient(app)

    response = client.post("/auth/login", json={"access_token": "gh-token"})

    assert response.status_code == 200
    assert response.json() == {"token": "session-token"}

    app.dependency_overrides.clear()


def test_login_maps_domain_errors():
    client = TestClient(app)
    cases = [
        (ProviderTokenRejectedError("GitHub rejected the credential."), 401, "Invalid token."),
        (
            NoPrimaryEmailError("no primary"),
            422,
            "No primary email found on the GitHub account.",
        ),
        (UpstreamUnavailableError("connect failed"), 502, "Upstream service unavailable."),
    ]

    for error, status_code, detail in cases:
        use_case = FakeSessionUseCase(error=error)
        app.dependency_overrides[get_login_github_token_use_case] = lambda: use_case
        response = client.post("/auth/login", json={"access_token": "gh-token"})
        assert response.status_code == status_code
        assert response.json()["detail"] == detail

    app.dependency_overrides.clear()


def test_logout_disables_bearer_token():
    use_case = FakeLogoutUseCase()
    app.dependency_overrides[get_logout_token_use_case] = lambda: use_case
    client = TestClient(app)

    response = client.post("/auth/logout", headers={"Authorization": "Bearer tok-1"})
    missing = client.post("/auth/logout")

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert use_case.tokens == ["tok-1"]
    assert missing.status_code == 401

    app.dependency_overrides.clear()


def test_web_logout_clears_cookie():
    use_case = FakeLogoutUseCase()
    app.dependency_overrides[get_logout_token_use_case] = lambda: use_case
    client = TestClient(app)
    client.cookies.set("session_token", "tok-1")

    response = client.get("/auth/logout", follow_redirects=False)

    assert response.status_code == 303
    assert use_case.tokens == ["tok-1"]
    assert 'session_token=""' in response.headers["set-cookie"]

    app.dependency_overrides.clear()


def test_healthz_is_public():
    response = TestClient(app).get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
