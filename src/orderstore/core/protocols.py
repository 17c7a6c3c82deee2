"""
Protocol definitions for database access.

The stores depend on the *shape* of a DB-API connection, not on a driver.
A raw ``sqlite3.Connection`` satisfies :class:`Connection` as-is; a
SQLAlchemy session does through
:class:`~orderstore.core.orm.session.SAConnectionBridge`.

Architecture:
    ::

        Connection Protocol:
        ┌────────────────────────────────────────────────────────┐
        │ execute(sql, params)   → Cursor                        │
        │ executemany(sql, list) → Cursor                        │
        │ commit()               → Commit transaction            │
        │ rollback()             → Rollback transaction          │
        └────────────────────────────────────────────────────────┘

        Cursor Protocol:
        ┌────────────────────────────────────────────────────────┐
        │ fetchone() / fetchall()                                │
        │ description            → column names (DB-API 2.0)     │
        │ lastrowid              → id of the last inserted row   │
        │ rowcount               → rows touched by last DML      │
        └────────────────────────────────────────────────────────┘

Tags:
    protocol, connection, database, order-store
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Cursor(Protocol):
    """Result handle returned by :meth:`Connection.execute`."""

    @property
    def description(self) -> Any:
        ...

    @property
    def lastrowid(self) -> int | None:
        ...

    @property
    def rowcount(self) -> int:
        ...

    def fetchone(self) -> Any:
        ...

    def fetchall(self) -> list:
        ...


@runtime_checkable
class Connection(Protocol):
    """
    Minimal synchronous connection interface.

    Examples:
        >>> cursor = conn.execute("SELECT * FROM content_records WHERE id = ?", (1,))
        >>> row = cursor.fetchone()
    """

    def execute(self, sql: str, params: tuple = ()) -> Cursor:
        """Execute SQL statement with optional parameters."""
        ...

    def executemany(self, sql: str, params: list[tuple]) -> Any:
        """Execute SQL statement for multiple parameter sets."""
        ...

    def commit(self) -> None:
        """Commit current transaction."""
        ...

    def rollback(self) -> None:
        """Rollback current transaction."""
        ...


__all__ = [
    "Connection",
    "Cursor",
]
