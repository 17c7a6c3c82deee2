"""SQLAlchemy 2.0 table definitions for order-store.

The four tables behind the order mapper:

* ``content_records``       — generic content rows shared by several content
  types; orders are the rows whose ``record_type`` is ``shop_order``.
* ``record_attributes``     — key/value attributes scoped by ``record_id``.
* ``line_items``            — typed child rows owned by an order.
* ``line_item_attributes``  — key/value attributes scoped by ``item_id``.

There are no foreign keys: the attribute tables are shared with other content
types and the repositories keep referential integrity themselves (attribute
rows are always deleted before or with their owners).

Usage::

    from orderstore.core.orm import OrderStoreBase, create_engine

    engine = create_engine("sqlite:///orderstore.db")
    OrderStoreBase.metadata.create_all(engine)
"""

from __future__ import annotations

from sqlalchemy import Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from orderstore.core.orm.base import OrderStoreBase


class ContentRecordTable(OrderStoreBase):
    __tablename__ = "content_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    parent_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    record_type: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False, default="")
    excerpt: Mapped[str] = mapped_column(Text, nullable=False, default="")
    access_nonce: Mapped[str] = mapped_column(Text, nullable=False, default="")
    owner_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    ping_status: Mapped[str] = mapped_column(Text, nullable=False, default="closed")
    created_at: Mapped[str] = mapped_column(Text, nullable=False)
    created_at_gmt: Mapped[str] = mapped_column(Text, nullable=False)
    modified_at: Mapped[str] = mapped_column(Text, nullable=False)
    modified_at_gmt: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        Index("ix_content_records_type_status", "record_type", "status"),
        Index("ix_content_records_parent", "parent_id"),
        {"sqlite_autoincrement": True},
    )


class RecordAttributeTable(OrderStoreBase):
    __tablename__ = "record_attributes"

    attribute_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    record_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    attr_key: Mapped[str] = mapped_column(Text, nullable=False)
    attr_value: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (
        Index("ix_record_attributes_record_key", "record_id", "attr_key"),
    )


class LineItemTable(OrderStoreBase):
    __tablename__ = "line_items"

    item_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(Integer, nullable=False)
    item_type: Mapped[str] = mapped_column(Text, nullable=False)
    item_name: Mapped[str] = mapped_column(Text, nullable=False, default="")

    __table_args__ = (
        Index("ix_line_items_order_type", "order_id", "item_type"),
        {"sqlite_autoincrement": True},
    )


class LineItemAttributeTable(OrderStoreBase):
    __tablename__ = "line_item_attributes"

    attribute_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    item_id: Mapped[int] = mapped_column(Integer, nullable=False)
    attr_key: Mapped[str] = mapped_column(Text, nullable=False)
    attr_value: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (
        Index("ix_line_item_attributes_item_key", "item_id", "attr_key"),
    )


__all__ = [
    "ContentRecordTable",
    "RecordAttributeTable",
    "LineItemTable",
    "LineItemAttributeTable",
]
