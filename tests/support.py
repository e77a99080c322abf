from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from sqlalchemy import text

from cairos.application.dto.auth import PkcePair
from cairos.domain.entities.event import Event
from cairos.domain.entities.github import GithubEmail, GithubProfile
from cairos.domain.entities.user import AuthToken, User


class FakeAuthPort:
    def __init__(self):
        self.users: dict[int, User] = {}
        self.tokens: dict[str, AuthToken] = {}
        self.transactions = 0

    def execute_in_transaction(self, fn):
        self.transactions += 1
        return fn(self)

    def get_user_by_id(self, *, user_id: int) -> User | None:
        return self.users.get(user_id)

    def upsert_user(self, *, username: str, email: str, now: datetime) -> User:
        for user in self.users.values():
            if user.email == email:
                updated = replace(user, username=username)
                self.users[user.id] = updated
                return updated
        user = User(id=len(self.users) + 1, username=username, email=email, created_at=now)
        self.users[user.id] = user
        return user

    def create_token(self, *, user_id: int, token: str, created_at: datetime) -> AuthToken:
        auth_token = AuthToken(
            id=len(self.tokens) + 1,
            user_id=user_id,
            token=token,
            created_at=created_at,
            disabled_at=None,
        )
        self.tokens[token] = auth_token
        return auth_token

    def find_user_id_by_token(self, *, token: str) -> int | None:
        auth_token = self.tokens.get(token)
        if auth_token is None or not auth_token.is_active:
            return None
        return auth_token.user_id

    def disable_token(self, *, token: str, disabled_at: datetime) -> bool:
        auth_token = self.tokens.get(token)
        if auth_token is None or not auth_token.is_active:
            return False
        self.tokens[token] = replace(auth_token, disabled_at=disabled_at)
        return True


class FakeEventsPort:
    def __init__(self):
        self.events: list[Event] = []

    def create_event(
        self,
        *,
        user_id: int,
        uri: str,
        is_write: bool,
        language: str | None,
        line_number: int | None,
        cursor_pos: int | None,
        created_at: datetime,
    ) -> Event:
        event = Event(
            id=len(self.events) + 1,
            user_id=user_id,
            uri=uri,
            is_write=is_write,
            language=language,
            line_number=line_number,
            cursor_pos=cursor_pos,
            created_at=created_at,
        )
        self.events.append(event)
        return event


class FakeTokenPort:
    def __init__(self):
        self.issued = 0

    def generate_session_token(self) -> str:
        self.issued += 1
        return f"session-{self.issued}"

    def generate_csrf_state(self) -> str:
        return f"state-{self.issued}"

    def generate_pkce_pair(self) -> PkcePair:
        return PkcePair(verifier="verifier-1", challenge="challenge-1")


class FakeGithubOauthPort:
    def __init__(
        self,
        *,
        login: str = "octocat",
        profile_email: str | None = "octocat@example.com",
        emails: list[GithubEmail] | None = None,
        profile_error: Exception | None = None,
    ):
        self.login = login
        self.profile_email = profile_email
        self.emails = emails or []
        self.profile_error = profile_error
        self.exchanged: list[tuple[str, str]] = []
        self.email_lookups = 0

    def build_authorize_url(self, *, state: str, code_challenge: str) -> str:
        return (
            "https://github.com/login/oauth/authorize"
            f"?state={state}&code_challenge={code_challenge}&code_challenge_method=S256"
        )

    def exchange_code(self, *, code: str, code_verifier: str) -> str:
        self.exchanged.append((code, code_verifier))
        return f"gh-{code}"

    def get_profile(self, *, access_token: str) -> GithubProfile:
        if self.profile_error is not None:
            raise self.profile_error
        return GithubProfile(login=self.login, email=self.profile_email)

    def list_emails(self, *, access_token: str) -> list[GithubEmail]:
        self.email_lookups += 1
        return list(self.emails)


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def count_rows(engine, table: str) -> int:
    with engine.connect() as conn:
        return conn.execute(text(f"SELECT COUNT(*) FROM {table}")).scalar_one()
