"""Static attribute mapping for orders.

Reserved attributes map 1:1 to order properties and are written by the
attribute mapper, not by the order's generic metadata.  Anything else in
``record_attributes`` for an order is extension metadata.
"""

from __future__ import annotations

import json
from typing import Any

from orderstore.domain.order import NO_VALUE

# attribute key -> Order property, in write order
RESERVED_ATTRIBUTES: dict[str, str] = {
    "_order_currency": "currency",
    "_cart_discount": "discount_total",
    "_cart_discount_tax": "discount_tax",
    "_order_shipping": "shipping_total",
    "_order_shipping_tax": "shipping_tax",
    "_order_tax": "cart_tax",
    "_order_total": "total",
    "_order_version": "version",
    "_prices_include_tax": "prices_include_tax",
}

PRICES_INCLUDE_TAX_KEY = "_prices_include_tax"
PAYMENT_TOKENS_KEY = "_payment_tokens"

# Keys that never surface as generic metadata.
INTERNAL_META_KEYS: tuple[str, ...] = tuple(RESERVED_ATTRIBUTES) + (PAYMENT_TOKENS_KEY,)


def encode_value(value: Any) -> str:
    """Text form of a property value.  Booleans become ``yes``/``no``."""
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, list | tuple | dict):
        return json.dumps(list(value) if isinstance(value, tuple) else value)
    if value is None:
        return NO_VALUE
    return str(value)
