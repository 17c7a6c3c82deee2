"""Derived-cache invalidation after order mutations."""

from __future__ import annotations

from orderstore.core.cache import CacheBackend
from orderstore.core.logging import get_logger
from orderstore.stores.records import record_cache_key

logger = get_logger(__name__)

# Order-wide transients derived from every order.
ORDER_TRANSIENT_KEYS: tuple[str, ...] = ("order_counts", "order_report_totals")


class CacheInvalidator:
    """Drops cached values derived from an order.  Never raises."""

    def __init__(self, cache: CacheBackend | None = None) -> None:
        self.cache = cache

    def invalidate(self, order_id: int) -> None:
        if self.cache is None:
            return
        for key in (record_cache_key(order_id), *ORDER_TRANSIENT_KEYS):
            try:
                self.cache.delete(key)
            except Exception as exc:
                logger.warning(
                    "cache_invalidation_failed",
                    order_id=order_id,
                    cache_key=key,
                    error=str(exc),
                )


__all__ = [
    "ORDER_TRANSIENT_KEYS",
    "CacheInvalidator",
]
