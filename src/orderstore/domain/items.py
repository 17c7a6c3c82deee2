"""Typed line items owned by an order.

Every row in ``line_items`` carries an ``item_type`` discriminator.  The
registry below maps each discriminator to the class that represents it, so
the line item repository can hydrate rows without knowing the concrete
types::

    line_item → ProductItem      fee    → FeeItem
    shipping  → ShippingItem     tax    → TaxItem
    coupon    → CouponItem       other  → LineItem (generic)

Type-specific values live in the item's attributes (``line_item_attributes``)
and are exposed through :class:`ItemField` accessors.

Tags:
    domain, line-items, polymorphism, order-store
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, ClassVar

from orderstore.domain.order import _to_bool, _to_int, _to_str


class ItemField:
    """Read-only typed view over one item attribute."""

    def __init__(self, key: str, cast: Callable[[Any], Any] = str, default: Any = "") -> None:
        self.key = key
        self.cast = cast
        self.default = default

    def __get__(self, obj: LineItem | None, objtype: type | None = None) -> Any:
        if obj is None:
            return self
        raw = obj.meta.get(self.key)
        if raw is None or raw == "":
            return self.default
        return self.cast(raw)


@dataclass
class LineItem:
    """Generic line item; also used for unregistered item types."""

    ITEM_TYPE: ClassVar[str] = ""

    id: int = 0
    order_id: int = 0
    name: str = ""
    type: str = ""
    meta: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.type:
            self.type = self.ITEM_TYPE

    def get_meta(self, key: str, default: str = "") -> str:
        value = self.meta.get(key)
        return default if value is None else value


ITEM_TYPES: dict[str, type[LineItem]] = {}


def register_item_type(cls: type[LineItem]) -> type[LineItem]:
    """Class decorator adding *cls* to the discriminator registry."""
    ITEM_TYPES[cls.ITEM_TYPE] = cls
    return cls


def build_item(row: dict[str, Any], meta: dict[str, str]) -> LineItem:
    """Hydrate a ``line_items`` row into its registered representation."""
    item_type = row["item_type"]
    cls = ITEM_TYPES.get(item_type, LineItem)
    return cls(
        id=int(row["item_id"]),
        order_id=int(row["order_id"]),
        name=row.get("item_name") or "",
        type=item_type,
        meta=meta,
    )


@register_item_type
@dataclass
class ProductItem(LineItem):
    ITEM_TYPE: ClassVar[str] = "line_item"

    product_id = ItemField("_product_id", _to_int, 0)
    variation_id = ItemField("_variation_id", _to_int, 0)
    quantity = ItemField("_qty", _to_int, 1)
    tax_class = ItemField("_tax_class")
    subtotal = ItemField("_line_subtotal", _to_str, "0")
    subtotal_tax = ItemField("_line_subtotal_tax", _to_str, "0")
    total = ItemField("_line_total", _to_str, "0")
    total_tax = ItemField("_line_tax", _to_str, "0")


@register_item_type
@dataclass
class FeeItem(LineItem):
    ITEM_TYPE: ClassVar[str] = "fee"

    tax_class = ItemField("_tax_class")
    tax_status = ItemField("_tax_status", default="taxable")
    total = ItemField("_line_total", _to_str, "0")
    total_tax = ItemField("_line_tax", _to_str, "0")


@register_item_type
@dataclass
class ShippingItem(LineItem):
    ITEM_TYPE: ClassVar[str] = "shipping"

    method_id = ItemField("method_id")
    total = ItemField("cost", _to_str, "0")
    total_tax = ItemField("total_tax", _to_str, "0")


@register_item_type
@dataclass
class TaxItem(LineItem):
    ITEM_TYPE: ClassVar[str] = "tax"

    rate_id = ItemField("rate_id", _to_int, 0)
    label = ItemField("label")
    compound = ItemField("compound", _to_bool, False)
    tax_total = ItemField("tax_amount", _to_str, "0")
    shipping_tax_total = ItemField("shipping_tax_amount", _to_str, "0")


@register_item_type
@dataclass
class CouponItem(LineItem):
    ITEM_TYPE: ClassVar[str] = "coupon"

    discount = ItemField("discount_amount", _to_str, "0")
    discount_tax = ItemField("discount_amount_tax", _to_str, "0")

    @property
    def code(self) -> str:
        return self.name


__all__ = [
    "ITEM_TYPES",
    "CouponItem",
    "FeeItem",
    "ItemField",
    "LineItem",
    "ProductItem",
    "ShippingItem",
    "TaxItem",
    "build_item",
    "register_item_type",
]
