"""Lifecycle notifications for order records.

The data store publishes ``order.trashed`` and ``order.deleted`` after a
delete so that search indexing, audit logging and caches elsewhere in the
system can react without the mapper knowing about them.

The mapper runs synchronously, so the bus does too: :meth:`EventBus.publish`
calls every matching handler in subscription order before returning.  A
failing handler is logged and skipped; it never fails the delete that
triggered it.

Usage::

    from orderstore.core.events import InMemoryEventBus

    bus = InMemoryEventBus()

    def reindex(event):
        search.remove(event.payload["order_id"])

    bus.subscribe("order.*", reindex)

Tags:
    events, notifications, pub-sub, order-store
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from orderstore.core.logging import get_logger
from orderstore.core.timestamps import utc_now

logger = get_logger(__name__)

ORDER_TRASHED = "order.trashed"
ORDER_DELETED = "order.deleted"


@dataclass
class Event:
    """Event payload.

    Attributes:
        event_type: Dot-separated type (e.g., ``order.trashed``)
        source: Origin component
        payload: Event-specific data
        timestamp: When the event occurred (UTC)
        event_id: Unique event identifier
    """

    event_type: str
    source: str
    payload: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=utc_now)
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def matches(self, pattern: str) -> bool:
        """Check if event type matches a pattern (``*`` and ``prefix.*`` wildcards)."""
        if pattern == "*":
            return True
        if pattern.endswith(".*"):
            prefix = pattern[:-2]
            return self.event_type.startswith(prefix + ".")
        return self.event_type == pattern


EventHandler = Callable[[Event], None]


@runtime_checkable
class EventBus(Protocol):
    """Protocol for event bus implementations."""

    def publish(self, event: Event) -> None:
        ...

    def subscribe(self, event_type: str, handler: EventHandler) -> str:
        """Subscribe to a pattern.  Returns a subscription id."""
        ...


@dataclass
class Subscription:
    """Internal subscription record."""

    id: str
    pattern: str
    handler: EventHandler


class InMemoryEventBus:
    """In-process event bus delivering synchronously to matching handlers."""

    def __init__(self) -> None:
        self._subscriptions: dict[str, Subscription] = {}

    def publish(self, event: Event) -> None:
        for sub in list(self._subscriptions.values()):
            if not event.matches(sub.pattern):
                continue
            try:
                sub.handler(event)
            except Exception as e:
                logger.warning(
                    "event_handler_error",
                    subscription_id=sub.id,
                    event_type=event.event_type,
                    error=str(e),
                )

    def subscribe(self, event_type: str, handler: EventHandler) -> str:
        sub_id = f"sub_{uuid.uuid4().hex[:12]}"
        self._subscriptions[sub_id] = Subscription(id=sub_id, pattern=event_type, handler=handler)
        return sub_id


__all__ = [
    "ORDER_DELETED",
    "ORDER_TRASHED",
    "Event",
    "EventBus",
    "EventHandler",
    "InMemoryEventBus",
]
