"""Rich rendering of rows and diagnostics."""
from __future__ import annotations

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from rowkeeper.engine.db_row import DBRow

console = Console()


class Display:
    def __init__(self, target: Console | None = None) -> None:
        self.console = target or console

    def show_row(self, row: DBRow) -> None:
        table = Table(
            title=f"{type(row).__name__} #{row.db_id} ({row.table_name})",
            box=box.ROUNDED,
        )
        table.add_column("Property", style="cyan")
        table.add_column("Field", style="dim")
        table.add_column("Value")
        for descriptor in row.scheme:
            field = descriptor.storage_field or ", ".join(descriptor.linked_fields) or "-"
            if descriptor.read_only:
                field += " (ro)"
            table.add_row(descriptor.name, field, Text(str(row.get(descriptor.name))))
        self.console.print(table)

    def show_not_found(self, kind: str, row_id: int) -> None:
        self.console.print(f"No {kind} with id {row_id}.", style="red")

    def show_message(self, text: str) -> None:
        self.console.print(text, style="green", markup=False)

    def show_error(self, text: str) -> None:
        self.console.print(text, style="red", markup=False)

    def show_diagnostics(self, messages) -> None:
        for message in messages:
            self.console.print(f"! {message}", style="yellow", markup=False)
