"""
Order data store — persists the order aggregate.

:class:`OrderDataStore` is the facade callers use.  It splits an
:class:`~orderstore.domain.order.Order` across the generic storage tables
and puts it back together on read:

Architecture::

    ┌──────────────────────────────────────────────────────────────────────┐
    │                          OrderDataStore                              │
    │                                                                      │
    │  create/read/update/delete ──► ContentRecordRepository (core row)    │
    │                            ──► OrderAttributeMapper (reserved keys)  │
    │                            ──► Order.read/save_meta_data (generic)   │
    │  read_items/delete_items   ──► LineItemRepository                    │
    │  *_payment_token_ids       ──► PaymentTokenStore                     │
    │                                                                      │
    │  after every mutation      ──► CacheInvalidator, EventBus            │
    └──────────────────────────────────────────────────────────────────────┘

Each mutation is one unit of work on the injected connection: committed on
success, rolled back when anything raises.  Mutations run inside a
:class:`~orderstore.core.logging.LogContext` binding ``operation`` and the
order id, so repository and event-handler logs carry them too.  Per-key
attribute write failures do not raise; they are logged by the mapper.

Deleting an order never touches its line items or attributes.  A soft
delete moves the record to ``trash``; ``force_delete`` removes the row and
resets the aggregate's id to 0.

Usage::

    store = OrderDataStore(conn, settings, cache=InMemoryCache(), events=bus)
    order = Order()
    order.total = "10.00"
    store.create(order)

    loaded = Order(order.id)
    store.read(loaded)

Tags:
    facade, data-store, orders, order-store
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from orderstore.core.cache import CacheBackend
from orderstore.core.dialect import Dialect
from orderstore.core.errors import InvalidEntityError
from orderstore.core.events import ORDER_DELETED, ORDER_TRASHED, Event, EventBus
from orderstore.core.logging import LogContext, get_logger
from orderstore.core.protocols import Connection
from orderstore.core.settings import OrderStoreSettings
from orderstore.core.timestamps import (
    from_gmt_string,
    generate_access_nonce,
    to_gmt_string,
    to_local_string,
    utc_now,
)
from orderstore.domain.items import LineItem
from orderstore.domain.order import TRASH_STATUS, Order
from orderstore.stores.attributes import (
    AttributeRepository,
    AttributeWriteResult,
    OrderAttributeMapper,
)
from orderstore.stores.caching import CacheInvalidator
from orderstore.stores.items import LineItemRepository
from orderstore.stores.mapping import INTERNAL_META_KEYS
from orderstore.stores.records import ContentRecordRepository
from orderstore.stores.tokens import PaymentTokenStore

logger = get_logger(__name__)

ExcerptStrategy = Callable[[Order], str]


def no_excerpt(order: Order) -> str:  # noqa: ARG001
    return ""


class OrderDataStore:
    """Create, read, update and delete orders over one connection.

    Parameters:
        conn: Connection all repositories share.
        settings: Store configuration.  Never read from globals here.
        dialect: SQL dialect.  Defaults to SQLite.
        cache: Read-side cache for content records; invalidated after writes.
        events: Bus receiving ``order.trashed`` / ``order.deleted``.
        excerpt: Produces the record excerpt from the order.
    """

    EVENT_SOURCE = "order_store"

    def __init__(
        self,
        conn: Connection,
        settings: OrderStoreSettings,
        *,
        dialect: Dialect | None = None,
        cache: CacheBackend | None = None,
        events: EventBus | None = None,
        excerpt: ExcerptStrategy = no_excerpt,
    ) -> None:
        self.settings = settings
        self.events = events
        self.excerpt = excerpt
        self.records = ContentRecordRepository(conn, dialect, cache=cache)
        self.attributes = AttributeRepository(conn, dialect)
        self.items = LineItemRepository(conn, dialect)
        self.mapper = OrderAttributeMapper(self.attributes, settings)
        self.tokens = PaymentTokenStore(self.attributes)
        self.invalidator = CacheInvalidator(cache)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def create(self, order: Order) -> None:
        """Insert a new order and all of its attributes.

        Raises:
            RecordInsertError: The content record could not be inserted.
                The order keeps the id it had before the call.
        """
        order.version = self.settings.version
        if not order.currency:
            order.currency = self.settings.default_currency
        if order.date_created is None:
            order.date_created = utc_now()

        created = order.date_created
        data = {
            "parent_id": order.parent_id,
            "record_type": self.settings.record_type,
            "status": self._stored_status(order.status),
            "title": self._title(order),
            "excerpt": self.excerpt(order),
            "access_nonce": generate_access_nonce(),
            "owner_id": self.settings.record_owner_id,
            "ping_status": "closed",
            "created_at": to_local_string(created, self.settings.tzinfo),
            "created_at_gmt": to_gmt_string(created),
            "modified_at": to_local_string(created, self.settings.tzinfo),
            "modified_at_gmt": to_gmt_string(created),
        }

        previous_id = order.id
        with LogContext(operation="create", record_type=self.settings.record_type):
            try:
                with self.records.transaction():
                    order_id = self.records.create(data)
                    order.id = order_id
                    self.mapper.persist(order, force=True)
                    order.save_meta_data(self.attributes)
            except Exception:
                # Clear first; the id setter refuses swapping one assigned id for another.
                order.id = 0
                order.id = previous_id
                raise

            order.apply_changes()
            # Later writes must land in the tracker so update() sees them.
            order.set_object_read(True)
            self.invalidator.invalidate(order.id)
            logger.info("order_created", order_id=order.id, status=order.status)

    def read(self, order: Order) -> None:
        """Load an order by its id.

        Raises:
            InvalidEntityError: No order record exists for the id.
        """
        order.set_defaults()
        order.line_items = {}

        row = self.records.get(order.id) if order.id else None
        if row is None or row["record_type"] != self.settings.record_type:
            raise InvalidEntityError("Invalid order.").with_context(
                operation="read", record_id=order.id, record_type=self.settings.record_type
            )

        order.set_props(
            {
                "parent_id": row["parent_id"],
                "date_created": from_gmt_string(row["created_at_gmt"]),
                "date_modified": from_gmt_string(row["modified_at_gmt"]),
                "status": self._strip_prefix(row["status"]),
            }
        )
        self.mapper.hydrate(order)
        order.read_meta_data(self.attributes, exclude=INTERNAL_META_KEYS)
        order.set_object_read(True)
        logger.debug("order_read", order_id=order.id, status=order.status)

    def update(self, order: Order) -> AttributeWriteResult:
        """Rewrite the content record and the attributes changed since read."""
        order.version = self.settings.version
        if order.date_created is None:
            order.date_created = utc_now()

        changes = order.changes
        with LogContext(operation="update", order_id=order.id):
            with self.records.transaction():
                modified = order.date_modified if "date_modified" in changes else utc_now()
                self.records.update_record(
                    order.id,
                    {
                        "parent_id": order.parent_id,
                        "status": self._stored_status(order.status),
                        "excerpt": self.excerpt(order),
                        "created_at": to_local_string(order.date_created, self.settings.tzinfo),
                        "created_at_gmt": to_gmt_string(order.date_created),
                        "modified_at": to_local_string(modified, self.settings.tzinfo),
                        "modified_at_gmt": to_gmt_string(modified),
                    },
                )
                order.date_modified = modified
                result = self.mapper.persist(order)
                order.save_meta_data(self.attributes)

            order.apply_changes()
            self.invalidator.invalidate(order.id)
            logger.info(
                "order_updated",
                changed=sorted(changes),
                attributes_written=result.written,
            )
        return result

    def delete(self, order: Order, force_delete: bool = False) -> None:
        """Trash the order, or remove its record when ``force_delete``."""
        order_id = order.id
        if not order_id:
            return

        with LogContext(operation="delete", order_id=order_id, force_delete=force_delete):
            with self.records.transaction():
                if force_delete:
                    self.records.remove(order_id)
                else:
                    now = utc_now()
                    self.records.set_status(
                        order_id,
                        TRASH_STATUS,
                        {
                            "modified_at": to_local_string(now, self.settings.tzinfo),
                            "modified_at_gmt": to_gmt_string(now),
                        },
                    )

            if force_delete:
                order.id = 0
                event_type = ORDER_DELETED
            else:
                order.status = TRASH_STATUS
                event_type = ORDER_TRASHED

            self.invalidator.invalidate(order_id)
            logger.info(event_type.replace(".", "_"))
            self._publish(event_type, {"order_id": order_id})

    def list_orders(
        self,
        status: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """Record summaries, newest first.  ``status`` is unprefixed."""
        rows = self.records.list_by_type(
            self.settings.record_type,
            status=self._stored_status(status) if status else None,
            limit=limit,
            offset=offset,
        )
        return [
            {
                "id": row["id"],
                "status": self._strip_prefix(row["status"]),
                "title": row["title"],
                "created_at_gmt": row["created_at_gmt"],
            }
            for row in rows
        ]

    # ------------------------------------------------------------------
    # Line items
    # ------------------------------------------------------------------

    def read_items(self, order: Order, item_type: str) -> dict[int, LineItem]:
        """Items of *item_type*, also cached on ``order.line_items``."""
        items = self.items.read_items(order, item_type)
        order.line_items[item_type] = items
        return items

    def delete_items(self, order: Order, item_type: str | None = None) -> int:
        with LogContext(operation="delete_items", order_id=order.id):
            removed = self.items.delete_items(order, item_type)
            if item_type:
                order.line_items.pop(item_type, None)
            else:
                order.line_items = {}
            self.invalidator.invalidate(order.id)
        return removed

    # ------------------------------------------------------------------
    # Payment tokens
    # ------------------------------------------------------------------

    def get_payment_token_ids(self, order: Order) -> list[int]:
        return self.tokens.get_token_ids(order)

    def set_payment_token_ids(self, order: Order, token_ids: Iterable[int]) -> None:
        with LogContext(operation="set_payment_token_ids", order_id=order.id):
            with self.records.transaction():
                self.tokens.set_token_ids(order, token_ids)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _stored_status(self, status: str) -> str:
        status = status or self.settings.default_status
        if status == TRASH_STATUS:
            return status
        return f"{self.settings.status_prefix}{status}"

    def _strip_prefix(self, status: str | None) -> str:
        prefix = self.settings.status_prefix
        status = status or ""
        return status[len(prefix) :] if prefix and status.startswith(prefix) else status

    def _title(self, order: Order) -> str:
        created = order.date_created.astimezone(self.settings.tzinfo)
        return "Order – " + created.strftime("%b %d, %Y @ %I:%M %p")

    def _publish(self, event_type: str, payload: dict[str, Any]) -> None:
        if self.events is None:
            return
        self.events.publish(Event(event_type=event_type, source=self.EVENT_SOURCE, payload=payload))


__all__ = [
    "ExcerptStrategy",
    "OrderDataStore",
    "no_excerpt",
]
