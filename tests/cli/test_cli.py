"""Tests for the orderstore CLI (typer CliRunner over a file-backed SQLite database)."""

from __future__ import annotations

import sqlite3

import pytest
import structlog
from typer.testing import CliRunner

from orderstore import __version__
from orderstore.cli.app import app
from orderstore.core.settings import OrderStoreSettings
from orderstore.domain.order import Order
from orderstore.stores.order_store import OrderDataStore

runner = CliRunner()


@pytest.fixture(autouse=True)
def _restore_logging():
    yield
    structlog.reset_defaults()


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "orders.db"
    result = runner.invoke(app, ["db", "init", "--database", f"sqlite:///{path}"])
    assert result.exit_code == 0, result.output
    return path


@pytest.fixture
def db_url(db_path) -> str:
    return f"sqlite:///{db_path}"


@pytest.fixture
def order_id(db_path) -> int:
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    store = OrderDataStore(conn, OrderStoreSettings(_env_file=None))
    order = Order()
    order.total = "18.00"
    order.currency = "usd"
    store.create(order)
    store.items.add_item(order.id, "fee", "Gift wrap", {"_line_total": "3.00"})
    store.set_payment_token_ids(order, [4, 0, 9])
    conn.close()
    return order.id


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_db_init_idempotent(db_url):
    result = runner.invoke(app, ["db", "init", "--database", db_url])
    assert result.exit_code == 0
    assert "Schema ready" in result.output


def test_db_ddl():
    result = runner.invoke(app, ["db", "ddl"])
    assert result.exit_code == 0
    assert "CREATE TABLE content_records" in result.output


def test_show(db_url, order_id):
    result = runner.invoke(app, ["orders", "show", str(order_id), "--database", db_url, "--json"])
    assert result.exit_code == 0, result.output
    assert '"total": "18.00"' in result.output
    assert '"currency": "USD"' in result.output


def test_show_missing(db_url):
    result = runner.invoke(app, ["orders", "show", "999", "--database", db_url])
    assert result.exit_code == 1


def test_list(db_url, order_id):
    result = runner.invoke(app, ["orders", "list", "--database", db_url, "--json"])
    assert result.exit_code == 0, result.output
    assert f'"id": {order_id}' in result.output
    assert '"status": "pending"' in result.output


def test_items(db_url, order_id):
    result = runner.invoke(app, ["orders", "items", str(order_id), "--type", "fee", "--database", db_url, "--json"])
    assert result.exit_code == 0, result.output
    assert "Gift wrap" in result.output


def test_tokens(db_url, order_id):
    result = runner.invoke(app, ["orders", "tokens", str(order_id), "--database", db_url, "--json"])
    assert result.exit_code == 0, result.output
    assert "9" in result.output


def test_trash(db_url, db_path, order_id):
    result = runner.invoke(app, ["orders", "trash", str(order_id), "--database", db_url])
    assert result.exit_code == 0, result.output
    conn = sqlite3.connect(str(db_path))
    status = conn.execute("SELECT status FROM content_records WHERE id = ?", (order_id,)).fetchone()[0]
    conn.close()
    assert status == "trash"


def test_delete_requires_confirmation(db_url, order_id):
    result = runner.invoke(app, ["orders", "delete", str(order_id), "--database", db_url], input="n\n")
    assert result.exit_code == 1
    shown = runner.invoke(app, ["orders", "show", str(order_id), "--database", db_url])
    assert shown.exit_code == 0


def test_delete(db_url, order_id):
    result = runner.invoke(app, ["orders", "delete", str(order_id), "--yes", "--database", db_url])
    assert result.exit_code == 0, result.output
    shown = runner.invoke(app, ["orders", "show", str(order_id), "--database", db_url])
    assert shown.exit_code == 1
