"""Base repository with dialect-aware database access.

Provides :class:`BaseRepository` — pairs a
:class:`~orderstore.core.protocols.Connection` with a
:class:`~orderstore.core.dialect.Dialect` so the order repositories write
portable SQL without referencing a driver.

Architecture::

    ┌────────────────────────────────────────────────────────────────────┐
    │                       BaseRepository                               │
    │                                                                    │
    │   conn: Connection        ← protocol from orderstore.core.protocols│
    │   dialect: Dialect        ← from orderstore.core.dialect           │
    │                                                                    │
    │   execute(sql, params)     → cursor                                │
    │   query(sql, params)       → list[dict]                            │
    │   query_one(sql, params)   → dict | None                           │
    │   insert(table, data)      → generated id                          │
    │   transaction()            → commit / rollback scope               │
    │   savepoint()              → rollback to a savepoint               │
    └────────────────────────────────────────────────────────────────────┘

Transactions nest per connection: only the outermost ``transaction()``
commits or rolls back, so a store-level unit of work can wrap repository
methods that open their own scope.  ``savepoint()`` isolates one step of a
unit of work: a failure inside it is rolled back to the savepoint and
re-raised, and the surrounding transaction stays usable.  PostgreSQL marks
a transaction aborted after any failed statement not rolled back this way.

Usage:
    >>> class MyRepo(BaseRepository):
    ...     def get_by_id(self, id: int):
    ...         return self.query_one(
    ...             f"SELECT * FROM my_table WHERE id = {self.ph(1)}",
    ...             (id,),
    ...         )
"""

from __future__ import annotations

import itertools
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from orderstore.core.dialect import Dialect, SQLiteDialect
from orderstore.core.protocols import Connection

# id(conn) -> open transaction depth
_DEPTH: dict[int, int] = {}
_SAVEPOINT_IDS = itertools.count(1)


class BaseRepository:
    """Dialect-aware base class for data-access repositories.

    Parameters:
        conn: Any object satisfying the :class:`Connection` protocol.
        dialect: SQL dialect to use.  Defaults to :class:`SQLiteDialect`.
    """

    def __init__(self, conn: Connection, dialect: Dialect | None = None) -> None:
        self.conn = conn
        self.dialect: Dialect = dialect or SQLiteDialect()

    # -- Convenience shortcuts ---------------------------------------------

    def ph(self, count: int) -> str:
        """Shortcut for ``self.dialect.placeholders(count)``."""
        return self.dialect.placeholders(count)

    # -- Query helpers -----------------------------------------------------

    def execute(self, sql: str, params: tuple = ()) -> Any:
        """Execute a statement and return the raw cursor/result."""
        return self.conn.execute(sql, params)

    def query(self, sql: str, params: tuple = ()) -> list[dict[str, Any]]:
        """Execute a SELECT and return rows as dicts."""
        cursor = self.conn.execute(sql, params)
        rows = cursor.fetchall()
        if not rows:
            return []

        # sqlite3.Row and dict-style cursors
        if not isinstance(rows[0], tuple | list):
            return [dict(row) for row in rows]

        columns = [desc[0] for desc in cursor.description]
        return [dict(zip(columns, row, strict=False)) for row in rows]

    def query_one(self, sql: str, params: tuple = ()) -> dict[str, Any] | None:
        """Execute a SELECT and return the first row as a dict (or None)."""
        results = self.query(sql, params)
        return results[0] if results else None

    # -- Write helpers -----------------------------------------------------

    def insert(self, table: str, data: dict[str, Any], id_column: str = "id") -> int | None:
        """Insert a single row from a dict and return its generated id."""
        columns = list(data.keys())
        sql = self.dialect.insert_returning(table, columns, id_column)
        cursor = self.conn.execute(sql, tuple(data.values()))
        if self.dialect.uses_returning:
            row = cursor.fetchone()
            return row[0] if row else None
        return cursor.lastrowid

    def update(self, table: str, data: dict[str, Any], where: dict[str, Any]) -> int:
        """Update rows matching *where* (equality, AND-ed).  Returns rowcount."""
        sets = ", ".join(f"{col} = {self.dialect.placeholder(i)}" for i, col in enumerate(data))
        conds = " AND ".join(
            f"{col} = {self.dialect.placeholder(len(data) + i)}" for i, col in enumerate(where)
        )
        cursor = self.conn.execute(
            f"UPDATE {table} SET {sets} WHERE {conds}",
            (*data.values(), *where.values()),
        )
        return cursor.rowcount

    def delete(self, table: str, where: dict[str, Any]) -> int:
        """Delete rows matching *where* (equality, AND-ed).  Returns rowcount."""
        conds = " AND ".join(
            f"{col} = {self.dialect.placeholder(i)}" for i, col in enumerate(where)
        )
        cursor = self.conn.execute(f"DELETE FROM {table} WHERE {conds}", tuple(where.values()))
        return cursor.rowcount

    # -- Transactions ------------------------------------------------------

    def commit(self) -> None:
        """Commit the current transaction."""
        self.conn.commit()

    def rollback(self) -> None:
        """Roll back the current transaction."""
        self.conn.rollback()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Commit on success, roll back on error.  Nested scopes defer to the outermost."""
        key = id(self.conn)
        depth = _DEPTH.get(key, 0)
        _DEPTH[key] = depth + 1
        try:
            yield
        except BaseException:
            if depth == 0:
                self.conn.rollback()
            raise
        else:
            if depth == 0:
                self.conn.commit()
        finally:
            if depth == 0:
                _DEPTH.pop(key, None)
            else:
                _DEPTH[key] = depth

    @contextmanager
    def savepoint(self) -> Iterator[None]:
        """Roll back only this block on error, then re-raise."""
        name = f"orderstore_sp_{next(_SAVEPOINT_IDS)}"
        self.conn.execute(f"SAVEPOINT {name}")
        try:
            yield
        except BaseException:
            self.conn.execute(f"ROLLBACK TO SAVEPOINT {name}")
            self.conn.execute(f"RELEASE SAVEPOINT {name}")
            raise
        else:
            self.conn.execute(f"RELEASE SAVEPOINT {name}")


__all__ = [
    "BaseRepository",
]
