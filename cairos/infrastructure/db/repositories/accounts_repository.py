from __future__ import annotations

from datetime import datetime

from sqlalchemy import bindparam, text
from sqlalchemy.exc import SQLAlchemyError

from cairos.application.ports.auth_port import AuthPort
from cairos.domain.exceptions import StorageError
from cairos.infrastructure.db.mappers.accounts_mapper import map_row_to_auth_token, map_row_to_user
from cairos.infrastructure.db.session import TIMESTAMP, SqlRepository


_USER_COLUMNS = {"created_at": TIMESTAMP}
_TOKEN_COLUMNS = {"created_at": TIMESTAMP, "disabled_at": TIMESTAMP}


class SqlAccountsRepository(SqlRepository, AuthPort):
    def execute_in_transaction(self, fn):
        if self._connection is not None:
            return fn(self)
        try:
            with self._engine.begin() as conn:
                return fn(SqlAccountsRepository(self._engine, connection=conn))
        except SQLAlchemyError as exc:
            raise StorageError("Database transaction failed.") from exc

    def get_user_by_id(self, *, user_id: int):
        sql = text(
            """
            SELECT id, username, email, created_at
            FROM users
            WHERE id = :user_id
            LIMIT 1
            """
        ).columns(**_USER_COLUMNS)
        with self._read() as conn:
            row = conn.execute(sql, {"user_id": user_id}).mappings().first()
        if row is None:
            return None
        return map_row_to_user(row)

    def upsert_user(self, *, username: str, email: str, now: datetime):
        sql = (
            text(
                """
                INSERT INTO users (username, email, created_at)
                VALUES (:username, :email, :created_at)
                ON CONFLICT (email)
                DO UPDATE SET username = excluded.username
                RETURNING id, username, email, created_at
                """
            )
            .bindparams(bindparam("created_at", type_=TIMESTAMP))
            .columns(**_USER_COLUMNS)
        )
        params = {
            "username": username,
            "email": email,
            "created_at": now,
        }
        with self._write() as conn:
            row = conn.execute(sql, params).mappings().one()
        return map_row_to_user(row)

    def create_token(self, *, user_id: int, token: str, created_at: datetime):
        sql = (
            text(
                """
                INSERT INTO auth_tokens (user_id, token, created_at)
                VALUES (:user_id, :token, :created_at)
                RETURNING id, user_id, token, created_at, disabled_at
                """
            )
            .bindparams(bindparam("created_at", type_=TIMESTAMP))
            .columns(**_TOKEN_COLUMNS)
        )
        params = {
            "user_id": user_id,
            "token": token,
            "created_at": created_at,
        }
        with self._write() as conn:
            row = conn.execute(sql, params).mappings().one()
        return map_row_to_auth_token(row)

    def find_user_id_by_token(self, *, token: str) -> int | None:
        sql = text(
            """
            SELECT users.id
            FROM auth_tokens
            INNER JOIN users
              ON users.id = auth_tokens.user_id
            WHERE auth_tokens.token = :token
              AND auth_tokens.disabled_at IS NULL
            LIMIT 1
            """
        )
        with self._read() as conn:
            user_id = conn.execute(sql, {"token": token}).scalar_one_or_none()
        return int(user_id) if user_id is not None else None

    def disable_token(self, *, token: str, disabled_at: datetime) -> bool:
        sql = text(
            """
            UPDATE auth_tokens
            SET disabled_at = :disabled_at
            WHERE token = :token
              AND disabled_at IS NULL
            """
        ).bindparams(bindparam("disabled_at", type_=TIMESTAMP))
        with self._write() as conn:
            result = conn.execute(sql, {"token": token, "disabled_at": disabled_at})
        return result.rowcount > 0
