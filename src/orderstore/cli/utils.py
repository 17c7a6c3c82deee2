"""
CLI utility helpers — output formatting and store construction.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from orderstore.core.cache import InMemoryCache
from orderstore.core.dialect import dialect_for_url
from orderstore.core.errors import OrderStoreError
from orderstore.core.events import InMemoryEventBus
from orderstore.core.logging import configure_logging
from orderstore.core.orm.session import SAConnectionBridge, create_engine, session_factory
from orderstore.core.settings import OrderStoreSettings, get_settings
from orderstore.stores.order_store import OrderDataStore

console = Console()
err_console = Console(stderr=True)


# ── Store helper ─────────────────────────────────────────────────────────


def load_settings(database: str | None = None) -> OrderStoreSettings:
    """Settings from the environment, with ``--database`` taking precedence."""
    try:
        settings = get_settings()
    except OrderStoreError as exc:
        fail(exc)
    if database:
        settings = settings.model_copy(update={"database_url": database})
    configure_logging(level=settings.log_level, json_format=settings.log_format == "json")
    return settings


@contextmanager
def open_store(database: str | None = None) -> Iterator[OrderDataStore]:
    """An :class:`OrderDataStore` over a fresh session, closed on exit."""
    settings = load_settings(database)
    engine = create_engine(settings.database_url, echo=settings.database_echo)
    session = session_factory(engine)()
    try:
        yield OrderDataStore(
            SAConnectionBridge(session),
            settings,
            dialect=dialect_for_url(settings.database_url),
            cache=InMemoryCache(
                max_size=settings.cache_max_size,
                default_ttl_seconds=settings.cache_ttl_seconds,
            ),
            events=InMemoryEventBus(),
        )
    except OrderStoreError as exc:
        fail(exc)
    finally:
        session.close()
        engine.dispose()


# ── Output helpers ───────────────────────────────────────────────────────


def fail(error: OrderStoreError) -> None:
    """Print a store error and exit with status 1."""
    err_console.print(f"[bold red]Error[/bold red] ({error.category.value}): {error.message}")
    raise typer.Exit(code=1)


def output(data: dict[str, Any] | list[dict[str, Any]], *, as_json: bool = False, title: str = "") -> None:
    """Render a dict as key/value pairs or a list of dicts as a table."""
    if as_json:
        console.print_json(json.dumps(data, default=str))
        return

    if isinstance(data, list):
        if not data:
            console.print("[dim]No items.[/dim]")
            return
        _print_table(data, title=title)
    else:
        _print_dict(data, title=title)


# ── Private helpers ──────────────────────────────────────────────────────


def _print_table(items: list[dict[str, Any]], *, title: str = "") -> None:
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in items[0]:
        table.add_column(col, overflow="fold")
    for item in items:
        table.add_row(*(str(v) for v in item.values()))
    console.print(table)


def _print_dict(data: dict[str, Any], *, title: str = "") -> None:
    if title:
        console.print(f"[bold]{title}[/bold]")
    for k, v in data.items():
        console.print(f"  [cyan]{k}[/cyan]: {v}")
