"""SQLAlchemy 2.0 ORM layer for order-store.

The repositories speak raw SQL over the ``Connection`` protocol; this
package owns the authoritative table definitions, engine/session factories
and the bridge that lets the repositories run on an ORM session.

Modules
-------
base        OrderStoreBase (declarative base)
session     Engine factory, OrderStoreSession, SAConnectionBridge, schema helpers
tables      ContentRecordTable, RecordAttributeTable, LineItemTable,
            LineItemAttributeTable
"""

from __future__ import annotations

from orderstore.core.orm.base import OrderStoreBase
from orderstore.core.orm.session import (
    OrderStoreSession,
    SAConnectionBridge,
    create_engine,
    create_schema,
    schema_ddl,
    session_factory,
)
from orderstore.core.orm.tables import (
    ContentRecordTable,
    LineItemAttributeTable,
    LineItemTable,
    RecordAttributeTable,
)

__all__ = [
    "OrderStoreBase",
    "OrderStoreSession",
    "SAConnectionBridge",
    "create_engine",
    "create_schema",
    "schema_ddl",
    "session_factory",
    "ContentRecordTable",
    "RecordAttributeTable",
    "LineItemTable",
    "LineItemAttributeTable",
]
