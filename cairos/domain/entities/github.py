from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GithubProfile:
    login: str
    email: str | None


@dataclass(frozen=True)
class GithubEmail:
    email: str
    primary: bool
    verified: bool


def select_primary_email(emails: list[GithubEmail]) -> str | None:
    for entry in emails:
        if entry.primary and entry.email:
            return entry.email
    return None
