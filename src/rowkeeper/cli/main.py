"""Typer CLI application."""
from __future__ import annotations

import logging
from typing import Optional

import typer
from rich.logging import RichHandler

from rowkeeper.config import RowKeeperConfig, load_config
from rowkeeper.diagnostics import Diagnostics
from rowkeeper.errors import PropertyAccessError, StorageError
from rowkeeper.rows import ROW_TYPES
from rowkeeper.storage.database import Database

app = typer.Typer(
    name="rowkeeper",
    help="Inspect and adjust rows managed by the rowkeeper persistence engine",
    no_args_is_help=True,
)


class _State:
    config: RowKeeperConfig = RowKeeperConfig()


state = _State()


@app.callback()
def main(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to rowkeeper.toml"),
    db_path: Optional[str] = typer.Option(None, "--db", help="Override the database path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log SQL and diagnostics"),
) -> None:
    state.config = load_config(config)
    if db_path:
        state.config.storage.db_path = db_path
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(message)s", handlers=[RichHandler(show_path=False)],
        )


def _open_database() -> Database:
    settings = state.config.storage
    return Database(settings.db_path, table_prefix=settings.table_prefix)


def _row_class(kind: str):
    try:
        return ROW_TYPES[kind]
    except KeyError:
        raise typer.BadParameter(f"unknown row type '{kind}', expected one of {sorted(ROW_TYPES)}")


@app.command()
def init() -> None:
    """Create the bundled row tables."""
    from rowkeeper.cli.display import Display

    db = _open_database()
    try:
        db.initialize()
    finally:
        db.close()
    Display().show_message(f"Tables ready in {state.config.storage.db_path}")


@app.command()
def show(kind: str, row_id: int) -> None:
    """Print every property of one row."""
    from rowkeeper.cli.display import Display

    display = Display()
    db = _open_database()
    try:
        row = _row_class(kind)(db, Diagnostics())
        if not row.load(row_id, skip_lock=True):
            display.show_not_found(kind, row_id)
            display.show_diagnostics(row.diagnostics.messages)
            raise typer.Exit(code=1)
        display.show_row(row)
    finally:
        db.close()


@app.command()
def adjust(
    kind: str,
    row_id: int,
    prop: str,
    delta: float = typer.Option(..., "--by", "-b", help="Amount to add (negative to subtract)"),
) -> None:
    """Add an amount to a numeric property as an in-database delta."""
    from rowkeeper.cli.display import Display

    display = Display()
    db = _open_database()
    diagnostics = Diagnostics(strict=state.config.diagnostics.strict)
    try:
        with db.transaction():
            row = _row_class(kind)(db, diagnostics)
            if not row.load(row_id):
                display.show_not_found(kind, row_id)
                raise typer.Exit(code=1)
            row.adjust(prop, int(delta) if delta.is_integer() else delta)
            row.save()
        row.load(row_id, skip_lock=True)
        display.show_row(row)
    except (PropertyAccessError, StorageError) as exc:
        display.show_error(str(exc))
        raise typer.Exit(code=1)
    finally:
        display.show_diagnostics(diagnostics.messages)
        db.close()


if __name__ == "__main__":
    app()
