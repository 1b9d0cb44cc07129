"""Meta inspection commands."""

from __future__ import annotations

import json
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

console = Console()

meta_app = typer.Typer(
    name="meta",
    help="Meta inspection operations",
    no_args_is_help=True,
)


@meta_app.command(name="types")
def list_types() -> None:
    """
    List registered data type handlers in resolution order.
    """
    from metable_db.models.orm import Meta

    table = Table(title="Data Type Handlers")
    table.add_column("#", justify="right")
    table.add_column("Type", style="cyan")
    table.add_column("Handler", style="magenta")

    for index, handler in enumerate(Meta.datatypes, start=1):
        table.add_row(str(index), handler.get_data_type(), type(handler).__name__)

    console.print(table)


@meta_app.command(name="show")
def show_meta(
    owner_type: Annotated[str, typer.Argument(help="Morph alias of the owner class")],
    owner_id: Annotated[int, typer.Argument(help="Owner primary key")],
    db_url: Annotated[
        Optional[str],
        typer.Option("--url", help="Database URL (default: $METABLE_DB_URL)"),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print rows as JSON"),
    ] = False,
) -> None:
    """
    Show the stored meta rows of one owner.

    Values are shown in their serialized form.
    """
    from sqlalchemy.exc import SQLAlchemyError
    from sqlalchemy.orm import Session

    from metable_db.config import MetableSettings
    from metable_db.db import MetaRepository, get_engine
    from metable_db.models.orm import Meta
    from metable_db.models.schemas import MetaResponse

    settings = MetableSettings.from_env(database_url=db_url)
    engine = get_engine(settings.database_url, echo=settings.echo)

    try:
        with Session(engine) as session:
            records = MetaRepository(session, Meta).list_for_owner(owner_type, owner_id)
            rows = [MetaResponse.model_validate(record) for record in records]
    except SQLAlchemyError as e:
        console.print(f"[red]✗[/red] Failed to read meta: {e}")
        raise typer.Exit(code=1) from e

    if as_json:
        typer.echo(json.dumps([row.model_dump() for row in rows], indent=2))
        return

    if not rows:
        console.print(f"No meta for {owner_type}:{owner_id}")
        return

    table = Table(title=f"Meta for {owner_type}:{owner_id}")
    table.add_column("Key", style="cyan")
    table.add_column("Type", style="magenta")
    table.add_column("Value")

    for row in rows:
        table.add_row(row.key, row.type, "" if row.raw_value is None else row.raw_value)

    console.print(table)
