"""Shared fixtures for the rowkeeper test suite."""
from __future__ import annotations

from typing import Any

import pytest

from rowkeeper.diagnostics import Diagnostics
from rowkeeper.engine.db_row import DBRow
from rowkeeper.mechanics.codec import to_int, to_str
from rowkeeper.models.property_scheme import PropertyDescriptor, PropertyScheme
from rowkeeper.storage.base import RowStorage


class RecordingStorage(RowStorage):
    """In-memory storage fake that records every statement."""

    def __init__(self, rows: dict[int, dict] | None = None) -> None:
        self.rows = rows or {}
        self.statements: list[tuple[str, tuple]] = []
        self.locks: list[tuple[str, int]] = []
        self.transaction_open = True
        self.fail_next = False
        self.next_id = 1
        self._last_id = 0

    def execute(self, sql: str, params: tuple[Any, ...] = ()) -> bool:
        self.statements.append((sql, params))
        if self.fail_next:
            self.fail_next = False
            return False
        if sql.startswith("INSERT"):
            self._last_id = self.next_id
            self.next_id += 1
        return True

    def fetch_one(self, sql: str, params: tuple[Any, ...] = ()):
        self.statements.append((sql, params))
        return self.rows.get(params[0])

    def last_insert_id(self) -> int:
        return self._last_id

    def in_transaction(self) -> bool:
        return self.transaction_open

    def lock_row(self, table: str, row_id: int) -> None:
        self.locks.append((table, row_id))

    @property
    def last_sql(self) -> str:
        return self.statements[-1][0]

    @property
    def last_params(self) -> tuple:
        return self.statements[-1][1]


class StockRow(DBRow):
    """Small row type exercising every descriptor feature."""

    table = "stock"
    id_field = "id"
    scheme = PropertyScheme(
        PropertyDescriptor(name="quantity", storage_field="qty", default=0,
                           input_conversion=to_int),
        PropertyDescriptor(name="label", storage_field="label", default="",
                           input_conversion=to_str, output_method="_trim_label"),
        PropertyDescriptor(name="created", storage_field="created_at", read_only=True,
                           default=0),
        PropertyDescriptor(name="nickname", getter="_get_nickname", setter="_set_nickname"),
    )

    def is_empty(self) -> bool:
        return self.get("quantity") <= 0

    def _trim_label(self, value: str) -> str:
        return value.strip()

    def _get_nickname(self) -> str:
        return (self._get_stored("nickname") or "").title()

    def _set_nickname(self, value: str) -> None:
        self._set_stored("nickname", value.lower())


@pytest.fixture
def storage() -> RecordingStorage:
    return RecordingStorage()


@pytest.fixture
def diagnostics() -> Diagnostics:
    return Diagnostics()


@pytest.fixture
def stock(storage, diagnostics) -> StockRow:
    return StockRow(storage, diagnostics)


@pytest.fixture
def in_memory_db(tmp_path):
    from rowkeeper.storage.database import Database

    db = Database(str(tmp_path / "test.db"))
    db.initialize()
    yield db
    db.close()


@pytest.fixture
def make_stock(storage, diagnostics):
    return lambda: StockRow(storage, diagnostics)
