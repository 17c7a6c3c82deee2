"""
Shared pytest fixtures for order-store tests.

Every store test runs against a fresh in-memory SQLite database whose
schema is generated from the ORM tables, so raw-SQL repositories and the
SQLAlchemy models cannot drift apart.
"""

from __future__ import annotations

import sqlite3
import sys
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from orderstore.core.cache import InMemoryCache
from orderstore.core.events import Event, InMemoryEventBus
from orderstore.core.orm.session import schema_ddl
from orderstore.core.settings import OrderStoreSettings, reset_settings
from orderstore.stores.order_store import OrderDataStore


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark tests as unit unless they live under ``integration``."""
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """No ORDERSTORE_* variables leak into tests; cached settings are dropped."""
    import os

    for key in list(os.environ):
        if key.startswith("ORDERSTORE_"):
            monkeypatch.delenv(key)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def conn() -> Generator[sqlite3.Connection, None, None]:
    """In-memory SQLite connection with the order-store schema."""
    c = sqlite3.connect(":memory:")
    c.row_factory = sqlite3.Row
    for statement in schema_ddl("sqlite"):
        c.execute(statement)
    c.commit()
    yield c
    c.close()


@pytest.fixture
def settings() -> OrderStoreSettings:
    return OrderStoreSettings(_env_file=None)


@pytest.fixture
def cache() -> InMemoryCache:
    return InMemoryCache(max_size=100, default_ttl_seconds=None)


@pytest.fixture
def bus() -> InMemoryEventBus:
    return InMemoryEventBus()


@pytest.fixture
def published(bus: InMemoryEventBus) -> list[Event]:
    """Every event published on ``bus``."""
    events: list[Event] = []
    bus.subscribe("*", events.append)
    return events


@pytest.fixture
def store(
    conn: sqlite3.Connection,
    settings: OrderStoreSettings,
    cache: InMemoryCache,
    bus: InMemoryEventBus,
) -> OrderDataStore:
    return OrderDataStore(conn, settings, cache=cache, events=bus)


@pytest.fixture
def row_count(conn: sqlite3.Connection) -> Callable[..., int]:
    """``row_count(table, where, params)`` over the test connection."""

    def _count(table: str, where: str = "1 = 1", params: tuple = ()) -> int:
        return conn.execute(f"SELECT COUNT(*) FROM {table} WHERE {where}", params).fetchone()[0]

    return _count
