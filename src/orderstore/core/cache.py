"""
Caching abstraction for read-side representations.

:class:`CacheBackend` is the contract the record repository reads through
and the :class:`~orderstore.stores.caching.CacheInvalidator` clears.
:class:`InMemoryCache` is the bundled backend: bounded LRU with lazy TTL
expiry, single process.

Architecture:
    ::

        CacheBackend (Protocol)
        └── InMemoryCache  — single-process, bounded LRU

        API: get(key) → value | None
             set(key, value, ttl_seconds=None)
             delete(key)
             exists(key) → bool
             clear()

Examples:
    >>> cache = InMemoryCache(max_size=1000, default_ttl_seconds=3600)
    >>> cache.set("content_record:12", {"id": 12})
    >>> cache.get("content_record:12")
    {'id': 12}

Tags:
    cache, caching, in-memory, ttl, order-store
"""

from __future__ import annotations

import time
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CacheBackend(Protocol):
    """Protocol for cache backend implementations."""

    def get(self, key: str) -> Any | None:
        """Return the cached value, or ``None`` if missing or expired."""
        ...

    def set(self, key: str, value: Any, *, ttl_seconds: int | None = None) -> None:
        """Store a value.  ``ttl_seconds=None`` uses the backend default."""
        ...

    def delete(self, key: str) -> None:
        """Remove a key.  No-op if the key does not exist."""
        ...

    def exists(self, key: str) -> bool:
        ...

    def clear(self) -> None:
        ...


class InMemoryCache:
    """Bounded in-memory cache with TTL support.

    Uses LRU eviction when ``max_size`` is reached.

    Attributes:
        max_size: Maximum number of keys before LRU eviction.
        default_ttl_seconds: Default TTL for keys (``None`` → no expiry).
    """

    def __init__(
        self,
        *,
        max_size: int = 10_000,
        default_ttl_seconds: int | None = 3600,
    ):
        self._store: dict[str, tuple[Any, float | None]] = {}
        self._access_order: list[str] = []
        self._max_size = max_size
        self._default_ttl = default_ttl_seconds

    def get(self, key: str) -> Any | None:
        if key not in self._store:
            return None

        value, expires_at = self._store[key]

        if expires_at is not None and time.time() > expires_at:
            self.delete(key)
            return None

        self._touch(key)
        return value

    def set(self, key: str, value: Any, *, ttl_seconds: int | None = None) -> None:
        ttl = ttl_seconds if ttl_seconds is not None else self._default_ttl
        expires_at = (time.time() + ttl) if ttl else None

        if key not in self._store and len(self._store) >= self._max_size:
            if self._access_order:
                lru_key = self._access_order.pop(0)
                self._store.pop(lru_key, None)

        self._store[key] = (value, expires_at)
        self._touch(key)

    def delete(self, key: str) -> None:
        self._store.pop(key, None)
        if key in self._access_order:
            self._access_order.remove(key)

    def exists(self, key: str) -> bool:
        if key not in self._store:
            return False

        _, expires_at = self._store[key]
        if expires_at is not None and time.time() > expires_at:
            self.delete(key)
            return False

        return True

    def clear(self) -> None:
        self._store.clear()
        self._access_order.clear()

    def size(self) -> int:
        """Return current number of cached keys."""
        return len(self._store)

    def _touch(self, key: str) -> None:
        if key in self._access_order:
            self._access_order.remove(key)
        self._access_order.append(key)


__all__ = [
    "CacheBackend",
    "InMemoryCache",
]
