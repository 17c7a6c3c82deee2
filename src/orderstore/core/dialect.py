"""SQL dialect abstraction for the order repositories.

Repositories build SQL from :class:`Dialect` fragments so the same code runs
on SQLite (tests, single-node installs) and PostgreSQL.

Architecture::

    Repository Code:
    ┌────────────────────────────────────────────────────────────────┐
    │  sql = f"SELECT * FROM t WHERE id = {d.placeholder(0)}"        │
    │  sql = d.insert_returning("t", ["a", "b"], "id")               │
    └────────────────────────────────────────────────────────────────┘
                              │
                              ▼
              ┌──────────────────┐   ┌──────────────────────┐
              │ SQLite           │   │ PostgreSQL           │
              │ ?, ?             │   │ %s, %s               │
              │ cursor.lastrowid │   │ RETURNING id         │
              └──────────────────┘   └──────────────────────┘

Examples:
    >>> d = SQLiteDialect()
    >>> d.placeholders(3)
    '?, ?, ?'
    >>> get_dialect("postgresql").placeholders(2)
    '%s, %s'

Tags:
    dialect, sql, portability, order-store
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Dialect(Protocol):
    """SQL dialect contract.

    Every method returns a SQL fragment (or full statement) valid for the
    target database.
    """

    @property
    def name(self) -> str:
        """Human-readable dialect name (e.g. ``'sqlite'``)."""
        ...

    @property
    def uses_returning(self) -> bool:
        """Whether inserts report generated ids through ``RETURNING``."""
        ...

    def placeholder(self, index: int) -> str:
        """Single positional placeholder (0-based index)."""
        ...

    def placeholders(self, count: int) -> str:
        """Comma-separated placeholder list."""
        ...

    def insert_returning(self, table: str, columns: list[str], id_column: str) -> str:
        """``INSERT`` statement that makes the generated id retrievable."""
        ...


class SQLiteDialect:
    """SQLite dialect — ``?`` placeholders, ids from ``cursor.lastrowid``."""

    @property
    def name(self) -> str:
        return "sqlite"

    @property
    def uses_returning(self) -> bool:
        return False

    def placeholder(self, index: int) -> str:  # noqa: ARG002
        return "?"

    def placeholders(self, count: int) -> str:
        return ", ".join("?" for _ in range(count))

    def insert_returning(self, table: str, columns: list[str], id_column: str) -> str:  # noqa: ARG002
        cols = ", ".join(columns)
        return f"INSERT INTO {table} ({cols}) VALUES ({self.placeholders(len(columns))})"


class PostgreSQLDialect:
    """PostgreSQL dialect — ``%s`` placeholders (psycopg), ``RETURNING`` ids."""

    @property
    def name(self) -> str:
        return "postgresql"

    @property
    def uses_returning(self) -> bool:
        return True

    def placeholder(self, index: int) -> str:  # noqa: ARG002
        return "%s"

    def placeholders(self, count: int) -> str:
        return ", ".join("%s" for _ in range(count))

    def insert_returning(self, table: str, columns: list[str], id_column: str) -> str:
        cols = ", ".join(columns)
        return (
            f"INSERT INTO {table} ({cols}) VALUES ({self.placeholders(len(columns))}) "
            f"RETURNING {id_column}"
        )


_DIALECTS: dict[str, Dialect] = {
    "sqlite": SQLiteDialect(),
    "postgresql": PostgreSQLDialect(),
    "postgres": PostgreSQLDialect(),
}


def get_dialect(db_type: str) -> Dialect:
    """Get a dialect by database type name.

    Raises:
        ValueError: If ``db_type`` is not recognised.
    """
    key = db_type.lower()
    if key not in _DIALECTS:
        raise ValueError(
            f"Unknown dialect '{db_type}'. "
            f"Supported: {sorted(set(_DIALECTS) - {'postgres'})}"
        )
    return _DIALECTS[key]


def dialect_for_url(url: str) -> Dialect:
    """Pick the dialect matching a SQLAlchemy-style database URL."""
    scheme = url.split(":", 1)[0].split("+", 1)[0]
    return get_dialect(scheme)


__all__ = [
    "Dialect",
    "SQLiteDialect",
    "PostgreSQLDialect",
    "get_dialect",
    "dialect_for_url",
]
