"""
order-store: persistence mapper for the order aggregate.

Splits an order into a generic content record, key/value attributes and
owned line items, and assembles it again on read.

    >>> from orderstore import Order, OrderDataStore, get_settings
    >>> store = OrderDataStore(conn, get_settings())
    >>> store.create(Order())
"""

__version__ = "0.3.0"

from orderstore.core.errors import InvalidEntityError, OrderStoreError, RecordInsertError
from orderstore.core.settings import OrderStoreSettings, get_settings
from orderstore.domain import ExtraProperty, LineItem, Order
from orderstore.stores import OrderDataStore

__all__ = [
    "ExtraProperty",
    "InvalidEntityError",
    "LineItem",
    "Order",
    "OrderDataStore",
    "OrderStoreError",
    "OrderStoreSettings",
    "RecordInsertError",
    "__version__",
    "get_settings",
]
