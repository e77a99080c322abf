from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthUserOutput:
    id: int
    username: str
    email: str


@dataclass(frozen=True)
class AuthorizationRedirectOutput:
    url: str
    state: str


@dataclass(frozen=True)
class GithubCallbackInput:
    state: str
    code: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class LoginGithubTokenInput:
    access_token: str


@dataclass(frozen=True)
class SessionTokenOutput:
    user: AuthUserOutput
    token: str


@dataclass(frozen=True)
class LogoutTokenInput:
    token: str


@dataclass(frozen=True)
class PkcePair:
    verifier: str
    challenge: str
