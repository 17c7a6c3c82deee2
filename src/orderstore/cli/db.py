"""
CLI: ``orderstore db`` — database management commands.
"""

from __future__ import annotations

import typer

from orderstore.cli.utils import console, load_settings

app = typer.Typer(no_args_is_help=True)


@app.command()
def init(
    database: str | None = typer.Option(None, "--database", "-d", help="Database URL"),
) -> None:
    """Create the order-store tables that do not exist yet."""
    from orderstore.core.orm.session import create_engine, create_schema

    settings = load_settings(database)
    engine = create_engine(settings.database_url, echo=settings.database_echo)
    try:
        create_schema(engine)
    finally:
        engine.dispose()
    console.print(f"[green]Schema ready[/green] at {settings.database_url}")


@app.command()
def ddl(
    dialect: str = typer.Option("sqlite", "--dialect", help="sqlite or postgresql"),
) -> None:
    """Print the schema DDL without touching a database."""
    from orderstore.core.orm.session import schema_ddl

    for statement in schema_ddl(dialect):
        typer.echo(f"{statement};")
