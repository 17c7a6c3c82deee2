"""Tests for typed line items and the item-type registry."""

from orderstore.domain.items import (
    ITEM_TYPES,
    CouponItem,
    LineItem,
    ProductItem,
    ShippingItem,
    TaxItem,
    build_item,
)


def _row(item_type: str, name: str = "") -> dict:
    return {"item_id": 3, "order_id": 1, "item_type": item_type, "item_name": name}


class TestRegistry:
    def test_builtin_types(self):
        assert {"line_item", "fee", "shipping", "tax", "coupon"} <= set(ITEM_TYPES)

    def test_build_known_type(self):
        item = build_item(_row("line_item", "Mug"), {"_qty": "2"})
        assert isinstance(item, ProductItem)
        assert item.id == 3
        assert item.order_id == 1
        assert item.name == "Mug"
        assert item.quantity == 2

    def test_unknown_type_is_generic(self):
        item = build_item(_row("gift_card"), {"code": "X1"})
        assert type(item) is LineItem
        assert item.type == "gift_card"
        assert item.get_meta("code") == "X1"


class TestTypedFields:
    def test_product_defaults(self):
        item = ProductItem()
        assert item.type == "line_item"
        assert item.quantity == 1
        assert item.total == "0"
        assert item.product_id == 0

    def test_product_amounts(self):
        item = ProductItem(meta={"_line_total": "19.90", "_line_tax": "1.99", "_product_id": "12"})
        assert item.total == "19.90"
        assert item.total_tax == "1.99"
        assert item.product_id == 12

    def test_shipping(self):
        item = ShippingItem(meta={"method_id": "flat_rate", "cost": "5.00"})
        assert item.method_id == "flat_rate"
        assert item.total == "5.00"

    def test_tax_compound_flag(self):
        assert TaxItem(meta={"compound": "yes"}).compound is True
        assert TaxItem().compound is False

    def test_coupon_code_is_name(self):
        coupon = CouponItem(name="SPRING10", meta={"discount_amount": "3"})
        assert coupon.code == "SPRING10"
        assert coupon.discount == "3"

    def test_get_meta_default(self):
        assert LineItem().get_meta("missing", "d") == "d"
