"""Console script for metable_db."""

from __future__ import annotations

import typer
from rich.console import Console

app = typer.Typer(
    name="metable_db",
    help="Metable database CLI - inspect typed key/value meta",
    no_args_is_help=True,
)
console = Console()

# Import subcommand apps
from metable_db.cli.db_commands import db_app  # noqa: E402
from metable_db.cli.meta_commands import meta_app  # noqa: E402

# Register subcommands
app.add_typer(db_app, name="db", help="Database management operations")
app.add_typer(meta_app, name="meta", help="Meta inspection operations")


if __name__ == "__main__":
    app()
