"""Line item repository — ``line_items`` and ``line_item_attributes``.

Items are owned by an order but are never cascaded from order deletion;
callers remove them explicitly through :meth:`LineItemRepository.delete_items`.

Tags:
    repository, line-items, order-store
"""

from __future__ import annotations

from typing import Any

from orderstore.core.logging import get_logger
from orderstore.core.repository import BaseRepository
from orderstore.domain.items import LineItem, build_item
from orderstore.domain.order import Order

logger = get_logger(__name__)


def _order_id(order: Order | int) -> int:
    return order if isinstance(order, int) else order.id


class LineItemRepository(BaseRepository):
    """CRUD for line items and their attributes."""

    ITEMS_TABLE = "line_items"
    ATTRIBUTES_TABLE = "line_item_attributes"

    def read_items(self, order: Order | int, item_type: str) -> dict[int, LineItem]:
        """Items of one type keyed by item id, in ascending id order."""
        rows = self.query(
            f"SELECT item_id, order_id, item_type, item_name FROM {self.ITEMS_TABLE} "
            f"WHERE order_id = {self.ph(1)} AND item_type = {self.ph(1)} "
            f"ORDER BY item_id",
            (_order_id(order), item_type),
        )
        items: dict[int, LineItem] = {}
        for row in rows:
            item = build_item(row, self.read_item_attributes(row["item_id"]))
            items[item.id] = item
        return items

    def read_item_attributes(self, item_id: int) -> dict[str, str]:
        """First value per key for one item."""
        rows = self.query(
            f"SELECT attr_key, attr_value FROM {self.ATTRIBUTES_TABLE} "
            f"WHERE item_id = {self.ph(1)} ORDER BY attribute_id",
            (item_id,),
        )
        meta: dict[str, str] = {}
        for row in rows:
            meta.setdefault(row["attr_key"], row["attr_value"])
        return meta

    def add_item(
        self,
        order_id: int,
        item_type: str,
        name: str = "",
        attributes: dict[str, Any] | None = None,
    ) -> int:
        """Insert an item with its attributes.  Returns the new item id."""
        with self.transaction():
            item_id = int(
                self.insert(
                    self.ITEMS_TABLE,
                    {"order_id": order_id, "item_type": item_type, "item_name": name},
                    id_column="item_id",
                )
                or 0
            )
            if attributes:
                self.conn.executemany(
                    f"INSERT INTO {self.ATTRIBUTES_TABLE} (item_id, attr_key, attr_value) "
                    f"VALUES ({self.ph(3)})",
                    [(item_id, key, str(value)) for key, value in attributes.items()],
                )
        return item_id

    def delete_items(self, order: Order | int, item_type: str | None = None) -> int:
        """Remove items (of one type, or all when no type is given) and their attributes.

        Attributes go first; both statements share one transaction.
        Returns the number of items removed.
        """
        order_id = _order_id(order)
        selector = f"SELECT item_id FROM {self.ITEMS_TABLE} WHERE order_id = {self.ph(1)}"
        params: tuple = (order_id,)
        if item_type:
            selector += f" AND item_type = {self.ph(1)}"
            params = (*params, item_type)

        with self.transaction():
            self.execute(
                f"DELETE FROM {self.ATTRIBUTES_TABLE} WHERE item_id IN ({selector})",
                params,
            )
            where: dict[str, Any] = {"order_id": order_id}
            if item_type:
                where["item_type"] = item_type
            removed = self.delete(self.ITEMS_TABLE, where)

        logger.info("line_items_deleted", order_id=order_id, item_type=item_type, count=removed)
        return removed


__all__ = [
    "LineItemRepository",
]
