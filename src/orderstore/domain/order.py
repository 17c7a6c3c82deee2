"""Order aggregate with change tracking and extension metadata.

:class:`Order` is the in-memory object the data store persists.  It owns
three kinds of state:

* **Core and reserved properties** (status, currency, totals, ...) declared
  with :class:`OrderProperty`.  Writes made after the order has been read
  from storage are recorded in :attr:`Order.changes`, which drives partial
  attribute writes.
* **Extra properties** declared by subclasses through :attr:`Order.EXTRA_DATA`,
  an ordered registry of :class:`ExtraProperty` entries consulted during
  hydration.
* **Generic metadata**: an ordered list of :class:`MetaEntry` the aggregate
  loads and saves itself through a :class:`MetaStore`.

Lifecycle::

    Order()            set_defaults()         set_object_read(True)
       │   id=0             │                        │
       ▼                    ▼                        ▼
    properties go to   reset + tracker      writes recorded in changes
    _data directly     cleared              until apply_changes()

Tags:
    domain, aggregate, change-tracking, order-store
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, ClassVar, Protocol

from orderstore.core.errors import ValidationError
from orderstore.core.timestamps import ensure_aware

if TYPE_CHECKING:
    from orderstore.domain.items import LineItem

ORDER_STATUSES: tuple[str, ...] = (
    "pending",
    "processing",
    "on-hold",
    "completed",
    "cancelled",
    "refunded",
    "failed",
)
TRASH_STATUS = "trash"

# The aggregate's "no value".  Attributes holding it are deleted, never stored.
NO_VALUE = ""

# ---------------------------------------------------------------------------
# Value normalizers
# ---------------------------------------------------------------------------


def _to_str(value: Any) -> str:
    return "" if value is None else str(value)


def _to_int(value: Any) -> int:
    if value in (None, ""):
        return 0
    return int(value)


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("yes", "true", "1")
    return bool(value)


def _to_currency(value: Any) -> str:
    return _to_str(value).strip().upper()


def _to_datetime(value: Any) -> datetime | None:
    if value in (None, "", 0):
        return None
    if isinstance(value, datetime):
        return ensure_aware(value)
    if isinstance(value, int | float):
        return datetime.fromtimestamp(value, UTC)
    return ensure_aware(datetime.fromisoformat(str(value)))


class OrderProperty:
    """Descriptor routing attribute access through the change tracker."""

    def __init__(self, normalize: Callable[[Any], Any] = _to_str) -> None:
        self.normalize = normalize
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, obj: Order | None, objtype: type | None = None) -> Any:
        if obj is None:
            return self
        return obj.get_prop(self.name)

    def __set__(self, obj: Order, value: Any) -> None:
        obj.set_prop(self.name, self.normalize(value))


# ---------------------------------------------------------------------------
# Registries and metadata
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ExtraProperty:
    """An extension property hydrated from the ``_<key>`` attribute.

    ``getter`` is optional; when present the property is also persisted.
    """

    key: str
    setter: Callable[[Order, Any], None]
    getter: Callable[[Order], Any] | None = None

    @property
    def attribute_key(self) -> str:
        return f"_{self.key}"

    @classmethod
    def for_property(cls, key: str) -> ExtraProperty:
        """Register an :class:`OrderProperty` of the same name, read and write."""
        return cls(
            key=key,
            setter=lambda order, value: setattr(order, key, value),
            getter=lambda order: getattr(order, key),
        )


@dataclass
class MetaEntry:
    """One generic metadata entry.  ``id`` is ``None`` until saved."""

    key: str
    value: Any
    id: int | None = None
    dirty: bool = field(default=False, compare=False)


class MetaStore(Protocol):
    """Where an order loads and saves its generic metadata."""

    def read_meta(self, record_id: int) -> list[tuple[int, str, str | None]]:
        ...

    def add_meta(self, record_id: int, key: str, value: Any) -> int:
        ...

    def update_meta_by_id(self, attribute_id: int, key: str, value: Any) -> None:
        ...

    def delete_meta_by_id(self, attribute_id: int) -> None:
        ...


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------


class Order:
    """The order aggregate.

    Subclasses add properties by declaring more :class:`OrderProperty`
    descriptors, listing their defaults in ``extra_defaults`` and, when the
    values live in ``_<key>`` attributes, registering them in ``EXTRA_DATA``.
    """

    EXTRA_DATA: ClassVar[tuple[ExtraProperty, ...]] = ()
    valid_statuses: ClassVar[tuple[str, ...]] = ORDER_STATUSES + (TRASH_STATUS,)

    _defaults: ClassVar[dict[str, Any]] = {
        "parent_id": 0,
        "status": "",
        "currency": "",
        "version": "",
        "prices_include_tax": False,
        "date_created": None,
        "date_modified": None,
        "discount_total": "0",
        "discount_tax": "0",
        "shipping_total": "0",
        "shipping_tax": "0",
        "cart_tax": "0",
        "total": "0",
    }
    extra_defaults: ClassVar[dict[str, Any]] = {}

    parent_id = OrderProperty(_to_int)
    currency = OrderProperty(_to_currency)
    version = OrderProperty(_to_str)
    prices_include_tax = OrderProperty(_to_bool)
    date_created = OrderProperty(_to_datetime)
    date_modified = OrderProperty(_to_datetime)
    # Totals are opaque text; numeric checks belong to callers.
    discount_total = OrderProperty(_to_str)
    discount_tax = OrderProperty(_to_str)
    shipping_total = OrderProperty(_to_str)
    shipping_tax = OrderProperty(_to_str)
    cart_tax = OrderProperty(_to_str)
    total = OrderProperty(_to_str)

    def __init__(self, order_id: int = 0) -> None:
        self._id = 0
        self._data: dict[str, Any] = {}
        self._changes: dict[str, Any] = {}
        self._object_read = False
        self._meta: list[MetaEntry] = []
        self._deleted_meta_ids: list[int] = []
        self.line_items: dict[str, dict[int, LineItem]] = {}
        self.set_defaults()
        if order_id:
            self.id = order_id

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self._id}, status={self.status!r})"

    # -- identity ----------------------------------------------------------

    @property
    def id(self) -> int:
        return self._id

    @id.setter
    def id(self, value: int) -> None:
        value = _to_int(value)
        if value and self._id and value != self._id:
            raise ValidationError(
                "Order id is immutable once assigned", field="id", value=value
            ).with_context(record_id=self._id)
        self._id = value

    # -- status ------------------------------------------------------------

    @property
    def status(self) -> str:
        return self.get_prop("status")

    @status.setter
    def status(self, value: str) -> None:
        value = _to_str(value)
        if self._object_read and value and value not in self.valid_statuses:
            raise ValidationError("Unknown order status", field="status", value=value)
        self.set_prop("status", value)

    # -- change tracking ---------------------------------------------------

    @classmethod
    def default_values(cls) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            values.update(getattr(klass, "_defaults", {}))
            values.update(klass.__dict__.get("extra_defaults", {}))
        return values

    def get_prop(self, prop: str) -> Any:
        if prop in self._changes:
            return self._changes[prop]
        return self._data[prop]

    def set_prop(self, prop: str, value: Any) -> None:
        if prop not in self._data:
            raise ValidationError(f"Unknown order property: {prop}", field=prop)
        if self._object_read:
            if value != self._data[prop] or prop in self._changes:
                self._changes[prop] = value
        else:
            self._data[prop] = value

    def set_props(self, props: dict[str, Any]) -> None:
        for prop, value in props.items():
            setattr(self, prop, value)

    @property
    def changes(self) -> dict[str, Any]:
        """Properties written since the last read or save."""
        return dict(self._changes)

    def apply_changes(self) -> None:
        """Merge tracked changes into the base data and clear the tracker."""
        self._data.update(self._changes)
        self._changes = {}

    def set_defaults(self) -> None:
        """Reset every property, the tracker and generic metadata."""
        self._data = self.default_values()
        self._changes = {}
        self._object_read = False
        self._meta = []
        self._deleted_meta_ids = []

    @property
    def object_read(self) -> bool:
        return self._object_read

    def set_object_read(self, read: bool = True) -> None:
        self._object_read = bool(read)

    @classmethod
    def extra_data_keys(cls) -> list[str]:
        return [extra.key for extra in cls.EXTRA_DATA]

    # -- generic metadata --------------------------------------------------

    @property
    def meta_data(self) -> list[MetaEntry]:
        return list(self._meta)

    def get_meta(self, key: str, single: bool = True) -> Any:
        values = [entry.value for entry in self._meta if entry.key == key]
        if single:
            return values[0] if values else ""
        return values

    def add_meta_data(self, key: str, value: Any, unique: bool = False) -> None:
        if unique:
            self.delete_meta_data(key)
        self._meta.append(MetaEntry(key=key, value=value, dirty=True))

    def update_meta_data(self, key: str, value: Any, meta_id: int | None = None) -> None:
        for entry in self._meta:
            if (meta_id is not None and entry.id == meta_id) or (meta_id is None and entry.key == key):
                entry.key = key
                entry.value = value
                entry.dirty = True
                return
        self.add_meta_data(key, value)

    def delete_meta_data(self, key: str) -> None:
        self._drop_meta(lambda entry: entry.key == key)

    def delete_meta_data_by_id(self, meta_id: int) -> None:
        self._drop_meta(lambda entry: entry.id == meta_id)

    def _drop_meta(self, match: Callable[[MetaEntry], bool]) -> None:
        kept = []
        for entry in self._meta:
            if not match(entry):
                kept.append(entry)
            elif entry.id is not None:
                self._deleted_meta_ids.append(entry.id)
        self._meta = kept

    def read_meta_data(self, source: MetaStore, exclude: Iterable[str] = ()) -> None:
        """Load generic metadata, skipping internal keys."""
        self._meta = []
        self._deleted_meta_ids = []
        if not self._id:
            return
        skip = set(exclude) | {extra.attribute_key for extra in self.EXTRA_DATA}
        for attribute_id, key, value in source.read_meta(self._id):
            if key in skip:
                continue
            self._meta.append(MetaEntry(key=key, value=value, id=attribute_id))

    def save_meta_data(self, target: MetaStore) -> None:
        """Flush added, changed and deleted generic metadata."""
        if not self._id:
            return
        for attribute_id in self._deleted_meta_ids:
            target.delete_meta_by_id(attribute_id)
        self._deleted_meta_ids = []

        kept = []
        for entry in self._meta:
            if entry.value == NO_VALUE:
                if entry.id is not None:
                    target.delete_meta_by_id(entry.id)
                continue
            if entry.id is None:
                entry.id = target.add_meta(self._id, entry.key, entry.value)
            elif entry.dirty:
                target.update_meta_by_id(entry.id, entry.key, entry.value)
            entry.dirty = False
            kept.append(entry)
        self._meta = kept


__all__ = [
    "NO_VALUE",
    "ORDER_STATUSES",
    "TRASH_STATUS",
    "ExtraProperty",
    "MetaEntry",
    "MetaStore",
    "Order",
    "OrderProperty",
]
