"""Contract the row engine needs from a storage backend."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping


class RowStorage(ABC):
    """Statement execution, single-row fetch, locking and transaction state."""

    table_prefix: str = ""

    def table_name(self, table: str) -> str:
        """Physical table name for a logical one."""
        return f"{self.table_prefix}{table}"

    @abstractmethod
    def execute(self, sql: str, params: tuple[Any, ...] = ()) -> bool:
        """Run a statement, True on success."""

    @abstractmethod
    def fetch_one(self, sql: str, params: tuple[Any, ...] = ()) -> Mapping[str, Any] | None: ...

    @abstractmethod
    def last_insert_id(self) -> int: ...

    @abstractmethod
    def in_transaction(self) -> bool: ...

    def lock_row(self, table: str, row_id: int) -> None:
        """Best-effort pessimistic lock of one row. Advisory by default."""
