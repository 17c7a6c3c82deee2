"""
Root Typer application for the order-store CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from orderstore import __version__

app = Typer(
    name="orderstore",
    help="order-store — persist and inspect orders.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"order-store {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """order-store CLI — manage the schema and inspect stored orders."""


# ── Sub-command registration ─────────────────────────────────────────────

from orderstore.cli.db import app as db_app  # noqa: E402
from orderstore.cli.orders import app as orders_app  # noqa: E402

app.add_typer(db_app, name="db", help="Database operations.")
app.add_typer(orders_app, name="orders", help="Order inspection and deletion.")


if __name__ == "__main__":
    app()
