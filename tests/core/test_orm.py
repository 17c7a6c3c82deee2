"""Tests for the ORM tables, schema helpers and the session bridge."""

from __future__ import annotations

import pytest
from sqlalchemy import inspect

from orderstore.core.orm.session import (
    SAConnectionBridge,
    create_engine,
    create_schema,
    schema_ddl,
    session_factory,
)
from orderstore.core.repository import BaseRepository

TABLES = {"content_records", "record_attributes", "line_items", "line_item_attributes"}


@pytest.fixture
def engine():
    eng = create_engine("sqlite:///:memory:")
    create_schema(eng)
    yield eng
    eng.dispose()


class TestSchema:
    def test_create_schema(self, engine):
        assert TABLES <= set(inspect(engine).get_table_names())

    def test_create_schema_idempotent(self, engine):
        create_schema(engine)

    def test_ddl_covers_all_tables(self):
        ddl = "\n".join(schema_ddl("sqlite"))
        for table in TABLES:
            assert f"CREATE TABLE {table}" in ddl

    def test_postgres_ddl(self):
        ddl = "\n".join(schema_ddl("postgresql"))
        assert "CREATE TABLE content_records" in ddl
        assert "SERIAL" in ddl


class TestSAConnectionBridge:
    def test_repository_over_session(self, engine):
        session = session_factory(engine)()
        repo = BaseRepository(SAConnectionBridge(session))
        item_id = repo.insert("line_items", {"order_id": 1, "item_type": "fee", "item_name": "Gift wrap"}, "item_id")
        repo.commit()
        row = repo.query_one("SELECT item_name, item_type FROM line_items WHERE item_id = ?", (item_id,))
        assert row == {"item_name": "Gift wrap", "item_type": "fee"}
        session.close()

    def test_rowcount(self, engine):
        session = session_factory(engine)()
        repo = BaseRepository(SAConnectionBridge(session))
        repo.insert("line_items", {"order_id": 1, "item_type": "fee"}, "item_id")
        assert repo.update("line_items", {"item_name": "x"}, {"order_id": 1}) == 1
        session.close()
