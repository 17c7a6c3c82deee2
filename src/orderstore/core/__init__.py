"""
order-store core primitives.

Storage plumbing (connection protocol, dialects, base repository, ORM tables),
configuration, structured logging, the error hierarchy, the read-side cache
and the lifecycle event bus.  Nothing here knows about orders.

Modules
-------
errors       OrderStoreError hierarchy
logging      structlog configuration, get_logger
settings     OrderStoreSettings (pydantic-settings)
protocols    Connection / Cursor protocols
dialect      SQLiteDialect, PostgreSQLDialect
repository   BaseRepository
cache        CacheBackend, InMemoryCache
events       Event, EventBus, InMemoryEventBus
timestamps   storage timestamp formatting, access nonces
orm          SQLAlchemy tables, engine/session, SAConnectionBridge
"""

from orderstore.core.cache import CacheBackend, InMemoryCache
from orderstore.core.dialect import Dialect, PostgreSQLDialect, SQLiteDialect, get_dialect
from orderstore.core.errors import (
    DatabaseError,
    ErrorCategory,
    ErrorContext,
    InvalidEntityError,
    OrderStoreError,
    RecordInsertError,
    ValidationError,
)
from orderstore.core.events import Event, EventBus, InMemoryEventBus
from orderstore.core.logging import configure_logging, get_logger
from orderstore.core.protocols import Connection
from orderstore.core.repository import BaseRepository
from orderstore.core.settings import OrderStoreSettings, get_settings

__all__ = [
    "BaseRepository",
    "CacheBackend",
    "Connection",
    "DatabaseError",
    "Dialect",
    "ErrorCategory",
    "ErrorContext",
    "Event",
    "EventBus",
    "InMemoryCache",
    "InMemoryEventBus",
    "InvalidEntityError",
    "OrderStoreError",
    "OrderStoreSettings",
    "PostgreSQLDialect",
    "RecordInsertError",
    "SQLiteDialect",
    "ValidationError",
    "configure_logging",
    "get_dialect",
    "get_logger",
    "get_settings",
]
