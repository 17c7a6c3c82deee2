"""
Tests for orderstore.core.cache.

Covers:
- CacheBackend protocol compliance
- InMemoryCache: get/set/delete/exists/clear, LRU eviction, TTL expiry
"""

import time

from orderstore.core.cache import CacheBackend, InMemoryCache


class TestInMemoryCache:
    def test_protocol(self):
        assert isinstance(InMemoryCache(), CacheBackend)

    def test_basic_get_set(self):
        cache = InMemoryCache(max_size=100, default_ttl_seconds=None)
        cache.set("content_record:1", {"id": 1})
        assert cache.get("content_record:1") == {"id": 1}

    def test_get_missing_key(self):
        assert InMemoryCache().get("missing") is None

    def test_delete(self):
        cache = InMemoryCache()
        cache.set("k", "v")
        cache.delete("k")
        assert not cache.exists("k")

    def test_delete_missing_is_noop(self):
        InMemoryCache().delete("nope")

    def test_clear(self):
        cache = InMemoryCache()
        cache.set("a", 1)
        cache.set("b", 2)
        cache.clear()
        assert cache.size() == 0

    def test_lru_eviction(self):
        cache = InMemoryCache(max_size=2, default_ttl_seconds=None)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.get("a")
        cache.set("c", 3)
        assert cache.exists("a")
        assert not cache.exists("b")
        assert cache.exists("c")

    def test_ttl_expiry(self):
        cache = InMemoryCache(default_ttl_seconds=None)
        cache.set("temp", "value", ttl_seconds=1)
        assert cache.exists("temp")
        time.sleep(1.1)
        assert cache.get("temp") is None
