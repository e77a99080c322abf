from __future__ import annotations

from typing import Any, Mapping

from cairos.domain.entities.user import AuthToken, User


def map_row_to_user(row: Mapping[str, Any]) -> User:
    return User(
        id=int(row["id"]),
        username=row["username"],
        email=row["email"],
        created_at=row["created_at"],
    )


def map_row_to_auth_token(row: Mapping[str, Any]) -> AuthToken:
    return AuthToken(
        id=int(row["id"]),
        user_id=int(row["user_id"]),
        token=row["token"],
        created_at=row["created_at"],
        disabled_at=row.get("disabled_at"),
    )
