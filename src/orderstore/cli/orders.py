"""
CLI: ``orderstore orders`` — inspect, trash and delete stored orders.
"""

from __future__ import annotations

from typing import Any

import typer

from orderstore.cli.utils import console, open_store, output
from orderstore.domain.items import LineItem
from orderstore.domain.order import Order

app = typer.Typer(no_args_is_help=True)


def _order_dict(order: Order) -> dict[str, Any]:
    return {
        "id": order.id,
        "parent_id": order.parent_id,
        "status": order.status,
        "currency": order.currency,
        "total": order.total,
        "cart_tax": order.cart_tax,
        "shipping_total": order.shipping_total,
        "discount_total": order.discount_total,
        "prices_include_tax": order.prices_include_tax,
        "version": order.version,
        "date_created": order.date_created.isoformat() if order.date_created else None,
        "date_modified": order.date_modified.isoformat() if order.date_modified else None,
        "meta": {entry.key: entry.value for entry in order.meta_data},
    }


def _item_dict(item: LineItem) -> dict[str, Any]:
    return {"id": item.id, "type": item.type, "name": item.name, **item.meta}


@app.command()
def show(
    order_id: int = typer.Argument(..., help="Order id"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Show one order with its attributes and metadata."""
    with open_store(database) as store:
        order = Order(order_id)
        store.read(order)
        output(_order_dict(order), as_json=json_out, title=f"Order #{order_id}")


@app.command("list")
def list_orders(
    status: str | None = typer.Option(None, "--status", help="Unprefixed status filter"),
    limit: int = typer.Option(50, "--limit"),
    offset: int = typer.Option(0, "--offset"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List stored orders, newest first."""
    with open_store(database) as store:
        rows = store.list_orders(status=status, limit=limit, offset=offset)
        output(rows, as_json=json_out, title="Orders")


@app.command()
def items(
    order_id: int = typer.Argument(..., help="Order id"),
    item_type: str = typer.Option("line_item", "--type", "-t", help="Item type"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List an order's line items of one type."""
    with open_store(database) as store:
        order = Order(order_id)
        store.read(order)
        found = store.read_items(order, item_type)
        output([_item_dict(item) for item in found.values()], as_json=json_out, title=f"{item_type} items")


@app.command()
def trash(
    order_id: int = typer.Argument(..., help="Order id"),
    database: str | None = typer.Option(None, "--database", "-d"),
) -> None:
    """Move an order to the trash."""
    with open_store(database) as store:
        order = Order(order_id)
        store.read(order)
        store.delete(order)
    console.print(f"Order #{order_id} moved to trash")


@app.command()
def delete(
    order_id: int = typer.Argument(..., help="Order id"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    database: str | None = typer.Option(None, "--database", "-d"),
) -> None:
    """Permanently delete an order record.  Line items are kept."""
    if not yes:
        typer.confirm(f"Permanently delete order #{order_id}?", abort=True)
    with open_store(database) as store:
        order = Order(order_id)
        store.read(order)
        store.delete(order, force_delete=True)
    console.print(f"Order #{order_id} deleted")


@app.command()
def tokens(
    order_id: int = typer.Argument(..., help="Order id"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Show the payment token ids referenced by an order."""
    with open_store(database) as store:
        order = Order(order_id)
        store.read(order)
        token_ids = store.get_payment_token_ids(order)
        output({"order_id": order_id, "token_ids": token_ids}, as_json=json_out, title="Payment tokens")
