"""Database management commands."""

from __future__ import annotations

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

console = Console()

db_app = typer.Typer(
    name="db",
    help="Database management operations",
    no_args_is_help=True,
)


@db_app.command(name="init")
def init_database(
    db_url: Annotated[
        Optional[str],
        typer.Option("--url", help="Database URL (default: $METABLE_DB_URL)"),
    ] = None,
) -> None:
    """
    Initialize database schema (idempotent).

    Creates the meta table. Safe to run multiple times.
    """
    from sqlalchemy import inspect

    from metable_db.config import MetableSettings
    from metable_db.db import create_db_and_tables, get_engine
    from metable_db.models.orm import Meta

    settings = MetableSettings.from_env(database_url=db_url)
    engine = get_engine(settings.database_url, echo=settings.echo)
    console.print(f"Database: {engine.url}")

    if inspect(engine).has_table(Meta.__tablename__):
        console.print("[green]✓[/green] Database already initialized")
        return

    create_db_and_tables(engine)
    console.print("[green]✓[/green] Database initialized successfully")


@db_app.command(name="info")
def database_info(
    db_url: Annotated[
        Optional[str],
        typer.Option("--url", help="Database URL (default: $METABLE_DB_URL)"),
    ] = None,
) -> None:
    """
    Display meta counts per owner type.
    """
    from sqlalchemy import func, inspect, select
    from sqlalchemy.orm import Session

    from metable_db.config import MetableSettings
    from metable_db.db import get_engine
    from metable_db.models.orm import Meta

    settings = MetableSettings.from_env(database_url=db_url)
    engine = get_engine(settings.database_url, echo=settings.echo)

    console.print(f"[bold blue]Database Info:[/bold blue] {engine.url}")
    console.print(f"Dialect: {engine.dialect.name}")

    if not inspect(engine).has_table(Meta.__tablename__):
        console.print("[red]✗[/red] Meta table missing; run 'db init' first")
        raise typer.Exit(code=1)

    table = Table(title="Meta Statistics")
    table.add_column("Owner type", style="cyan")
    table.add_column("Owners", style="magenta", justify="right")
    table.add_column("Rows", style="magenta", justify="right")

    stmt = (
        select(
            Meta.metable_type,
            func.count(func.distinct(Meta.metable_id)),
            func.count(Meta.id),
        )
        .group_by(Meta.metable_type)
        .order_by(Meta.metable_type)
    )
    with Session(engine) as session:
        for owner_type, owners, rows in session.execute(stmt):
            table.add_row(owner_type, str(owners), str(rows))

    console.print(table)
