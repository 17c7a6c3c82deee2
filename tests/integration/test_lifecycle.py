"""
End-to-end order lifecycle over a SQLAlchemy session.

Runs the store through ``SAConnectionBridge`` against a file-backed SQLite
database created by ``create_schema``, the same wiring the CLI uses.
"""

from __future__ import annotations

import pytest

from orderstore.core.cache import InMemoryCache
from orderstore.core.errors import InvalidEntityError
from orderstore.core.events import InMemoryEventBus
from orderstore.core.orm.session import SAConnectionBridge, create_engine, create_schema, session_factory
from orderstore.core.settings import OrderStoreSettings
from orderstore.domain.items import ProductItem
from orderstore.domain.order import Order
from orderstore.stores.order_store import OrderDataStore


@pytest.fixture
def session(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'orders.db'}")
    create_schema(engine)
    s = session_factory(engine)()
    yield s
    s.close()
    engine.dispose()


@pytest.fixture
def sa_store(session) -> OrderDataStore:
    return OrderDataStore(
        SAConnectionBridge(session),
        OrderStoreSettings(_env_file=None),
        cache=InMemoryCache(default_ttl_seconds=None),
        events=InMemoryEventBus(),
    )


def test_full_lifecycle(sa_store):
    trashed: list[int] = []
    sa_store.events.subscribe("order.trashed", lambda e: trashed.append(e.payload["order_id"]))

    order = Order()
    order.currency = "cad"
    order.total = "42.00"
    order.add_meta_data("channel", "pos")
    sa_store.create(order)
    assert order.id > 0

    sa_store.items.add_item(order.id, "line_item", "Mug", {"_qty": "2", "_line_total": "40.00"})
    sa_store.items.add_item(order.id, "shipping", "Flat rate", {"cost": "2.00"})
    sa_store.set_payment_token_ids(order, [11, 0, 12])

    loaded = Order(order.id)
    sa_store.read(loaded)
    assert loaded.currency == "CAD"
    assert loaded.total == "42.00"
    assert loaded.status == "pending"
    assert loaded.get_meta("channel") == "pos"

    products = sa_store.read_items(loaded, "line_item")
    (mug,) = products.values()
    assert isinstance(mug, ProductItem)
    assert mug.quantity == 2
    assert sa_store.get_payment_token_ids(loaded) == [11, 12]

    loaded.status = "completed"
    loaded.cart_tax = ""
    result = sa_store.update(loaded)
    assert set(result.deleted) == {"cart_tax"}

    sa_store.delete(loaded)
    assert trashed == [order.id]

    sa_store.delete_items(loaded)
    assert sa_store.read_items(loaded, "line_item") == {}

    sa_store.delete(loaded, force_delete=True)
    with pytest.raises(InvalidEntityError):
        sa_store.read(Order(order.id))


def test_rollback_keeps_storage_clean(sa_store, monkeypatch):
    def broken_add_meta(*args):
        raise RuntimeError("write failed")

    monkeypatch.setattr(sa_store.attributes, "add_meta", broken_add_meta)
    order = Order()
    order.add_meta_data("note", "x")

    with pytest.raises(RuntimeError):
        sa_store.create(order)

    assert order.id == 0
    assert sa_store.list_orders() == []


def test_failed_attribute_write_keeps_the_rest(sa_store, monkeypatch):
    real_upsert = sa_store.attributes.upsert

    def upsert_then_fail(record_id, key, value):
        real_upsert(record_id, key, value)
        if key == "_order_shipping":
            raise RuntimeError("write failed")

    monkeypatch.setattr(sa_store.attributes, "upsert", upsert_then_fail)
    order = Order()
    order.total = "9.99"
    order.shipping_total = "4.00"
    sa_store.create(order)
    monkeypatch.undo()

    assert order.id > 0
    assert sa_store.attributes.get(order.id, "_order_total") == "9.99"
    assert sa_store.attributes.get(order.id, "_order_shipping") is None
    assert [row["id"] for row in sa_store.list_orders()] == [order.id]
