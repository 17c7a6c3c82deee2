"""Order persistence: the data store facade and the repositories behind it."""

from orderstore.stores.attributes import (
    AttributeRepository,
    AttributeWriteResult,
    OrderAttributeMapper,
)
from orderstore.stores.caching import CacheInvalidator
from orderstore.stores.items import LineItemRepository
from orderstore.stores.mapping import INTERNAL_META_KEYS, RESERVED_ATTRIBUTES
from orderstore.stores.order_store import ExcerptStrategy, OrderDataStore
from orderstore.stores.records import ContentRecordRepository
from orderstore.stores.tokens import PaymentTokenStore

__all__ = [
    "INTERNAL_META_KEYS",
    "RESERVED_ATTRIBUTES",
    "AttributeRepository",
    "AttributeWriteResult",
    "CacheInvalidator",
    "ContentRecordRepository",
    "ExcerptStrategy",
    "LineItemRepository",
    "OrderAttributeMapper",
    "OrderDataStore",
    "PaymentTokenStore",
]
