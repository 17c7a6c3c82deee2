"""
Tests for the Order aggregate.

Covers:
- Defaults and normalization
- Change tracking before and after object_read
- Id immutability and status validation
- Extra property registry
- Generic metadata add/update/delete and save against a fake MetaStore
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, ClassVar

import pytest

from orderstore.core.errors import ValidationError
from orderstore.domain.order import NO_VALUE, ExtraProperty, Order, OrderProperty


class FakeMetaStore:
    """Records calls; hands out increasing ids."""

    def __init__(self, rows: list[tuple[int, str, str | None]] | None = None) -> None:
        self.rows = rows or []
        self.calls: list[tuple[Any, ...]] = []
        self._next_id = 100

    def read_meta(self, record_id: int) -> list[tuple[int, str, str | None]]:
        return list(self.rows)

    def add_meta(self, record_id: int, key: str, value: Any) -> int:
        self._next_id += 1
        self.calls.append(("add", key, value))
        return self._next_id

    def update_meta_by_id(self, attribute_id: int, key: str, value: Any) -> None:
        self.calls.append(("update", attribute_id, key, value))

    def delete_meta_by_id(self, attribute_id: int) -> None:
        self.calls.append(("delete", attribute_id))


class GiftOrder(Order):
    extra_defaults: ClassVar[dict[str, Any]] = {"gift_message": ""}
    gift_message = OrderProperty()
    EXTRA_DATA = (ExtraProperty.for_property("gift_message"),)


class TestDefaults:
    def test_new_order(self):
        order = Order()
        assert order.id == 0
        assert order.status == ""
        assert order.total == "0"
        assert order.prices_include_tax is False
        assert order.date_created is None
        assert order.meta_data == []

    def test_subclass_defaults_merge(self):
        order = GiftOrder()
        assert order.gift_message == ""
        assert order.total == "0"

    def test_extra_data_keys(self):
        assert GiftOrder.extra_data_keys() == ["gift_message"]
        assert GiftOrder.EXTRA_DATA[0].attribute_key == "_gift_message"


class TestNormalization:
    def test_currency_upper(self):
        order = Order()
        order.currency = "eur"
        assert order.currency == "EUR"

    def test_amount_stored_as_text(self):
        order = Order()
        order.total = 10.5
        assert order.total == "10.5"

    def test_amount_empty_allowed(self):
        order = Order()
        order.total = ""
        assert order.total == NO_VALUE

    @pytest.mark.parametrize("value", ["1e3", "N/A", "10.500", " 7 "])
    def test_amount_kept_verbatim(self, value):
        order = Order()
        order.total = value
        assert order.total == value

    def test_bool_from_yes(self):
        order = Order()
        order.prices_include_tax = "yes"
        assert order.prices_include_tax is True

    def test_naive_datetime_becomes_utc(self):
        order = Order()
        order.date_created = datetime(2024, 1, 1, 12, 0)
        assert order.date_created.tzinfo is UTC

    def test_unknown_property(self):
        with pytest.raises(ValidationError):
            Order().set_prop("colour", "red")


class TestChangeTracking:
    def test_no_changes_before_read(self):
        order = Order()
        order.total = "5"
        assert order.changes == {}
        assert order.total == "5"

    def test_changes_after_read(self):
        order = Order()
        order.set_object_read(True)
        order.total = "5"
        assert order.changes == {"total": "5"}

    def test_writing_same_value_is_not_a_change(self):
        order = Order()
        order.set_object_read(True)
        order.total = "0"
        assert order.changes == {}

    def test_apply_changes(self):
        order = Order()
        order.set_object_read(True)
        order.cart_tax = "1.5"
        order.apply_changes()
        assert order.changes == {}
        assert order.cart_tax == "1.5"

    def test_set_defaults_resets_everything(self):
        order = Order()
        order.total = "9"
        order.add_meta_data("gift", "yes")
        order.set_object_read(True)
        order.status = "completed"
        order.set_defaults()
        assert order.total == "0"
        assert order.changes == {}
        assert not order.object_read
        assert order.meta_data == []


class TestIdentity:
    def test_reassign_different_id(self):
        order = Order(5)
        with pytest.raises(ValidationError):
            order.id = 6

    def test_same_id_and_reset_allowed(self):
        order = Order(5)
        order.id = 5
        order.id = 0
        assert order.id == 0


class TestStatus:
    def test_unknown_status_rejected_after_read(self):
        order = Order()
        order.set_object_read(True)
        with pytest.raises(ValidationError):
            order.status = "shipped"

    def test_any_status_accepted_while_loading(self):
        order = Order()
        order.status = "checkout-draft"
        assert order.status == "checkout-draft"

    def test_trash_is_valid(self):
        order = Order()
        order.set_object_read(True)
        order.status = "trash"
        assert order.changes == {"status": "trash"}


class TestMetaData:
    def test_add_and_get(self):
        order = Order()
        order.add_meta_data("gift", "yes")
        order.add_meta_data("gift", "no")
        assert order.get_meta("gift") == "yes"
        assert order.get_meta("gift", single=False) == ["yes", "no"]
        assert order.get_meta("missing") == ""

    def test_unique_replaces(self):
        order = Order()
        order.add_meta_data("gift", "yes")
        order.add_meta_data("gift", "no", unique=True)
        assert order.get_meta("gift", single=False) == ["no"]

    def test_read_skips_excluded_and_extra_keys(self):
        source = FakeMetaStore(
            [(1, "_order_total", "5"), (2, "_gift_message", "hi"), (3, "note", "fragile")]
        )
        order = GiftOrder(9)
        order.read_meta_data(source, exclude=["_order_total"])
        assert [(m.id, m.key, m.value) for m in order.meta_data] == [(3, "note", "fragile")]

    def test_save_adds_updates_deletes(self):
        source = FakeMetaStore([(1, "keep", "a"), (2, "change", "b"), (3, "drop", "c")])
        order = Order(9)
        order.read_meta_data(source)
        order.update_meta_data("change", "B")
        order.delete_meta_data("drop")
        order.add_meta_data("new", "n")

        order.save_meta_data(source)

        assert ("delete", 3) in source.calls
        assert ("update", 2, "change", "B") in source.calls
        assert ("add", "new", "n") in source.calls
        assert not any(call[0] == "update" and call[1] == 1 for call in source.calls)
        assert order.meta_data[-1].id is not None

    def test_save_empty_value_deletes(self):
        source = FakeMetaStore([(1, "note", "x")])
        order = Order(9)
        order.read_meta_data(source)
        order.update_meta_data("note", NO_VALUE)
        order.add_meta_data("never_stored", NO_VALUE)

        order.save_meta_data(source)

        assert source.calls == [("delete", 1)]
        assert order.meta_data == []

    def test_save_without_id_is_noop(self):
        source = FakeMetaStore()
        order = Order()
        order.add_meta_data("x", "y")
        order.save_meta_data(source)
        assert source.calls == []
