"""Content record repository — the ``content_records`` table.

Rows are shared by several content types; the ``record_type`` column tells
them apart.  Single-row reads go through an optional
:class:`~orderstore.core.cache.CacheBackend` under ``content_record:<id>``;
the :class:`~orderstore.stores.caching.CacheInvalidator` clears that key
after every mutation.

Tags:
    repository, content-records, order-store
"""

from __future__ import annotations

from typing import Any

from orderstore.core.cache import CacheBackend
from orderstore.core.dialect import Dialect
from orderstore.core.errors import RecordInsertError
from orderstore.core.protocols import Connection
from orderstore.core.repository import BaseRepository


def record_cache_key(record_id: int) -> str:
    return f"content_record:{record_id}"


class ContentRecordRepository(BaseRepository):
    """CRUD for ``content_records``."""

    TABLE = "content_records"

    def __init__(
        self,
        conn: Connection,
        dialect: Dialect | None = None,
        cache: CacheBackend | None = None,
    ) -> None:
        super().__init__(conn, dialect)
        self.cache = cache

    def get(self, record_id: int) -> dict[str, Any] | None:
        """Get a record by id, reading through the cache."""
        if self.cache is not None:
            cached = self.cache.get(record_cache_key(record_id))
            if cached is not None:
                return dict(cached)

        row = self.query_one(
            f"SELECT * FROM {self.TABLE} WHERE id = {self.ph(1)}",
            (record_id,),
        )
        if row is not None and self.cache is not None:
            self.cache.set(record_cache_key(record_id), dict(row))
        return row

    def create(self, data: dict[str, Any]) -> int:
        """Insert a record and return its id.

        Raises:
            RecordInsertError: The statement failed or produced no id.
        """
        try:
            record_id = self.insert(self.TABLE, data)
        except Exception as exc:
            raise RecordInsertError(
                "Storage rejected the content record", cause=exc
            ).with_context(operation="create", record_type=data.get("record_type")) from exc

        if not record_id:
            raise RecordInsertError("Storage returned no id for the content record").with_context(
                operation="create", record_type=data.get("record_type")
            )
        return int(record_id)

    def update_record(self, record_id: int, data: dict[str, Any]) -> int:
        """Update columns in place.  Returns rowcount."""
        return self.update(self.TABLE, data, {"id": record_id})

    def set_status(self, record_id: int, status: str, modified: dict[str, str]) -> int:
        return self.update(self.TABLE, {"status": status, **modified}, {"id": record_id})

    def remove(self, record_id: int) -> int:
        """Physically delete a record.  Returns rowcount."""
        return self.delete(self.TABLE, {"id": record_id})

    def list_by_type(
        self,
        record_type: str,
        *,
        status: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """Newest-first listing of records of one type."""
        sql = f"SELECT * FROM {self.TABLE} WHERE record_type = {self.ph(1)}"
        params: tuple = (record_type,)
        if status is not None:
            sql += f" AND status = {self.ph(1)}"
            params = (*params, status)
        sql += f" ORDER BY id DESC LIMIT {self.ph(1)} OFFSET {self.ph(1)}"
        return self.query(sql, (*params, limit, offset))


__all__ = [
    "ContentRecordRepository",
    "record_cache_key",
]
