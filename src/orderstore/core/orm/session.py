"""SQLAlchemy engine factory, session, schema helpers and Connection bridge.

This module provides:

* ``create_engine``        -- Create a SA engine from a URL.
* ``OrderStoreSession``    -- A pre-configured ``Session`` subclass.
* ``session_factory``      -- ``sessionmaker`` producing ``OrderStoreSession``.
* ``create_schema``        -- Create the order-store tables on an engine.
* ``schema_ddl``           -- The same DDL as strings, for raw DB-API connections.
* ``SAConnectionBridge``   -- Wraps a SA ``Session`` to satisfy the
  ``orderstore.core.protocols.Connection`` protocol.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

from sqlalchemy import create_engine as _sa_create_engine
from sqlalchemy import event, text
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.schema import CreateIndex, CreateTable

from orderstore.core.orm.base import OrderStoreBase

_PLACEHOLDER = re.compile(r"\?|%s")

_SA_DIALECTS = {
    "sqlite": sqlite.dialect,
    "postgresql": postgresql.dialect,
}


def create_engine(url: str = "sqlite:///orderstore.db", *, echo: bool = False, **kwargs: Any) -> Engine:
    """Create a SQLAlchemy engine with sane defaults.

    File-backed SQLite databases are switched to WAL journaling.
    """
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        engine = _sa_create_engine(url, echo=echo, **kwargs)

        if ":memory:" not in url:

            @event.listens_for(engine, "connect")
            def _set_sqlite_pragma(dbapi_connection: Any, _rec: Any) -> None:
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA journal_mode=WAL")
                cursor.close()

        return engine

    return _sa_create_engine(url, echo=echo, **kwargs)


class OrderStoreSession(Session):
    """Pre-configured session with ``expire_on_commit=False``."""

    def __init__(self, bind: Engine | None = None, **kwargs: Any) -> None:
        kwargs.setdefault("expire_on_commit", False)
        super().__init__(bind=bind, **kwargs)


def session_factory(engine: Engine) -> sessionmaker[OrderStoreSession]:
    """Return a ``sessionmaker`` bound to *engine*."""
    return sessionmaker(bind=engine, class_=OrderStoreSession)


def create_schema(engine: Engine) -> None:
    """Create every order-store table that does not exist yet."""
    import orderstore.core.orm.tables  # noqa: F401  (registers the tables)

    OrderStoreBase.metadata.create_all(engine)


def schema_ddl(dialect_name: str = "sqlite") -> list[str]:
    """``CREATE TABLE`` / ``CREATE INDEX`` statements for a raw connection."""
    import orderstore.core.orm.tables  # noqa: F401

    sa_dialect = _SA_DIALECTS[dialect_name]()
    statements: list[str] = []
    for table in OrderStoreBase.metadata.sorted_tables:
        statements.append(str(CreateTable(table).compile(dialect=sa_dialect)).strip())
        for index in sorted(table.indexes, key=lambda ix: ix.name or ""):
            statements.append(str(CreateIndex(index).compile(dialect=sa_dialect)).strip())
    return statements


class _BridgeCursor:
    """DB-API style view over a SQLAlchemy ``CursorResult``."""

    def __init__(self, result: Any) -> None:
        self._result = result

    def fetchone(self) -> tuple[Any, ...] | None:
        row = self._result.fetchone()
        return tuple(row) if row is not None else None

    def fetchall(self) -> list[tuple[Any, ...]]:
        return [tuple(r) for r in self._result.fetchall()]

    @property
    def description(self) -> list[tuple[Any, ...]] | None:
        if not self._result.returns_rows:
            return None
        return [(k, None, None, None, None, None, None) for k in self._result.keys()]

    @property
    def lastrowid(self) -> int | None:
        return self._result.lastrowid

    @property
    def rowcount(self) -> int:
        return self._result.rowcount


class SAConnectionBridge:
    """Adapter that makes a SQLAlchemy ``Session`` look like ``Connection``.

    Positional placeholders (``?`` from ``SQLiteDialect``, ``%s`` from
    ``PostgreSQLDialect``) are rewritten to named ``:pN`` parameters for
    ``text()``.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def execute(self, sql: str, parameters: Sequence[Any] | None = None) -> _BridgeCursor:
        if not parameters:
            return _BridgeCursor(self._session.execute(text(sql)))

        counter = iter(range(len(parameters)))
        rewritten = _PLACEHOLDER.sub(lambda _m: f":p{next(counter)}", sql)
        mapping = {f"p{i}": v for i, v in enumerate(parameters)}
        return _BridgeCursor(self._session.execute(text(rewritten), mapping))

    def executemany(self, sql: str, seq_of_parameters: Sequence[Sequence[Any]]) -> None:
        for params in seq_of_parameters:
            self.execute(sql, params)

    def commit(self) -> None:
        self._session.commit()

    def rollback(self) -> None:
        self._session.rollback()

    @property
    def session(self) -> Session:
        """Access the underlying SA session (e.g., for ORM queries)."""
        return self._session
