from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import DateTime
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from cairos.domain.exceptions import StorageError


TIMESTAMP = DateTime(timezone=True)


class SqlRepository:
    """Base for repositories that run either standalone or inside a caller's transaction."""

    def __init__(self, engine, *, connection: Connection | None = None):
        self._engine = engine
        self._connection = connection

    @contextmanager
    def _read(self) -> Iterator[Connection]:
        if self._connection is not None:
            yield self._connection
            return
        try:
            with self._engine.connect() as conn:
                yield conn
        except SQLAlchemyError as exc:
            raise StorageError("Database read failed.") from exc

    @contextmanager
    def _write(self) -> Iterator[Connection]:
        if self._connection is not None:
            yield self._connection
            return
        try:
            with self._engine.begin() as conn:
                yield conn
        except SQLAlchemyError as exc:
            raise StorageError("Database write failed.") from exc
