"""Order domain: the aggregate, its change tracker and its line item types."""

from orderstore.domain.items import (
    ITEM_TYPES,
    CouponItem,
    FeeItem,
    LineItem,
    ProductItem,
    ShippingItem,
    TaxItem,
    build_item,
    register_item_type,
)
from orderstore.domain.order import (
    NO_VALUE,
    ORDER_STATUSES,
    TRASH_STATUS,
    ExtraProperty,
    MetaEntry,
    Order,
    OrderProperty,
)

__all__ = [
    "ITEM_TYPES",
    "NO_VALUE",
    "ORDER_STATUSES",
    "TRASH_STATUS",
    "CouponItem",
    "ExtraProperty",
    "FeeItem",
    "LineItem",
    "MetaEntry",
    "Order",
    "OrderProperty",
    "ProductItem",
    "ShippingItem",
    "TaxItem",
    "build_item",
    "register_item_type",
]
