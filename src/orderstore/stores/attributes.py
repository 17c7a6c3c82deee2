"""Attribute repository and the order attribute mapper.

:class:`AttributeRepository` is plain CRUD over ``record_attributes``
(shared by every content type, scoped by ``record_id``) and doubles as the
:class:`~orderstore.domain.order.MetaStore` orders use for their generic
metadata.

:class:`OrderAttributeMapper` moves the reserved attributes between an
order and that table:

* ``hydrate`` reads every reserved key, applies the tax-inclusive fallback
  and feeds registered extra properties.
* ``persist`` writes the reserved keys whose properties changed (all of them
  under ``force``).  The ``NO_VALUE`` sentinel deletes the row.  Each key is
  written under its own savepoint; a failing key is rolled back, logged and
  reported in the result, and the remaining keys are still written.

Tags:
    repository, attributes, key-value, order-store
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from orderstore.core.logging import get_logger
from orderstore.core.repository import BaseRepository
from orderstore.core.settings import OrderStoreSettings
from orderstore.domain.order import NO_VALUE, Order
from orderstore.stores.mapping import (
    PRICES_INCLUDE_TAX_KEY,
    RESERVED_ATTRIBUTES,
    encode_value,
)

logger = get_logger(__name__)


class AttributeRepository(BaseRepository):
    """CRUD for ``record_attributes``."""

    TABLE = "record_attributes"

    # -- reads -------------------------------------------------------------

    def read_meta(self, record_id: int) -> list[tuple[int, str, str | None]]:
        """All attributes of a record as ``(attribute_id, key, value)``, oldest first."""
        rows = self.query(
            f"SELECT attribute_id, attr_key, attr_value FROM {self.TABLE} "
            f"WHERE record_id = {self.ph(1)} ORDER BY attribute_id",
            (record_id,),
        )
        return [(row["attribute_id"], row["attr_key"], row["attr_value"]) for row in rows]

    def get_all(self, record_id: int) -> dict[str, str | None]:
        """First value per key."""
        values: dict[str, str | None] = {}
        for _, key, value in self.read_meta(record_id):
            values.setdefault(key, value)
        return values

    def get(self, record_id: int, key: str) -> str | None:
        row = self.query_one(
            f"SELECT attr_value FROM {self.TABLE} "
            f"WHERE record_id = {self.ph(1)} AND attr_key = {self.ph(1)} "
            f"ORDER BY attribute_id LIMIT 1",
            (record_id, key),
        )
        return row["attr_value"] if row else None

    def exists(self, record_id: int, key: str) -> bool:
        row = self.query_one(
            f"SELECT COUNT(*) AS cnt FROM {self.TABLE} "
            f"WHERE record_id = {self.ph(1)} AND attr_key = {self.ph(1)}",
            (record_id, key),
        )
        return bool(row and row["cnt"])

    # -- keyed writes --------------------------------------------------------

    def upsert(self, record_id: int, key: str, value: str) -> None:
        """Replace every value of *key* on the record, inserting if absent."""
        touched = self.update(
            self.TABLE,
            {"attr_value": value},
            {"record_id": record_id, "attr_key": key},
        )
        if not touched:
            self.insert(
                self.TABLE,
                {"record_id": record_id, "attr_key": key, "attr_value": value},
                id_column="attribute_id",
            )

    def delete_key(self, record_id: int, key: str) -> int:
        return self.delete(self.TABLE, {"record_id": record_id, "attr_key": key})

    # -- MetaStore (by attribute id) -----------------------------------------

    def add_meta(self, record_id: int, key: str, value: Any) -> int:
        attribute_id = self.insert(
            self.TABLE,
            {"record_id": record_id, "attr_key": key, "attr_value": encode_value(value)},
            id_column="attribute_id",
        )
        return int(attribute_id or 0)

    def update_meta_by_id(self, attribute_id: int, key: str, value: Any) -> None:
        self.update(
            self.TABLE,
            {"attr_key": key, "attr_value": encode_value(value)},
            {"attribute_id": attribute_id},
        )

    def delete_meta_by_id(self, attribute_id: int) -> None:
        self.delete(self.TABLE, {"attribute_id": attribute_id})


@dataclass
class AttributeWriteResult:
    """Outcome of one :meth:`OrderAttributeMapper.persist` call."""

    updated: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def written(self) -> int:
        return len(self.updated) + len(self.deleted)

    @property
    def ok(self) -> bool:
        return not self.failed


class OrderAttributeMapper:
    """Moves reserved and extra attributes between orders and storage."""

    def __init__(self, attributes: AttributeRepository, settings: OrderStoreSettings) -> None:
        self.attributes = attributes
        self.settings = settings

    def hydrate(self, order: Order) -> None:
        stored = self.attributes.get_all(order.id)

        props: dict[str, Any] = {}
        for key, prop in RESERVED_ATTRIBUTES.items():
            if key == PRICES_INCLUDE_TAX_KEY:
                continue
            value = stored.get(key)
            props[prop] = NO_VALUE if value is None else value

        if PRICES_INCLUDE_TAX_KEY in stored:
            props["prices_include_tax"] = stored[PRICES_INCLUDE_TAX_KEY] == "yes"
        else:
            props["prices_include_tax"] = self.settings.prices_include_tax
        order.set_props(props)

        for extra in order.EXTRA_DATA:
            value = stored.get(extra.attribute_key)
            extra.setter(order, NO_VALUE if value is None else value)

    def persist(self, order: Order, force: bool = False) -> AttributeWriteResult:
        changed = set() if force else set(order.changes)
        result = AttributeWriteResult()

        targets: list[tuple[str, str, Any]] = [
            (key, prop, getattr(order, prop))
            for key, prop in RESERVED_ATTRIBUTES.items()
            if force or prop in changed
        ]
        targets.extend(
            (extra.attribute_key, extra.key, extra.getter(order))
            for extra in order.EXTRA_DATA
            if extra.getter is not None and (force or extra.key in changed)
        )

        for key, prop, value in targets:
            text = encode_value(value)
            try:
                with self.attributes.savepoint():
                    if text == NO_VALUE:
                        self.attributes.delete_key(order.id, key)
                    else:
                        self.attributes.upsert(order.id, key, text)
            except Exception as exc:
                result.failed[key] = str(exc)
                logger.warning(
                    "attribute_write_failed",
                    order_id=order.id,
                    attr_key=key,
                    error=str(exc),
                )
            else:
                if text == NO_VALUE:
                    result.deleted.append(prop)
                else:
                    result.updated.append(prop)

        logger.debug(
            "attributes_persisted",
            order_id=order.id,
            force=force,
            updated=result.updated,
            deleted=result.deleted,
        )
        return result


__all__ = [
    "AttributeRepository",
    "AttributeWriteResult",
    "OrderAttributeMapper",
]
