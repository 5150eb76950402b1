"""SQLite implementation of the row storage contract."""
from __future__ import annotations

import contextlib
import logging
import pathlib
import sqlite3
from typing import Any, Generator

from rowkeeper.errors import StorageError
from rowkeeper.storage.base import RowStorage

logger = logging.getLogger(__name__)


class Database(RowStorage):
    """Single-connection SQLite backend.

    The connection runs in autocommit mode; ``transaction()`` opens explicit
    ``BEGIN IMMEDIATE`` transactions, which hold the database write lock for
    their whole duration.
    """

    def __init__(self, db_path: str, table_prefix: str = "") -> None:
        self.db_path = db_path
        self.table_prefix = table_prefix
        self.locked_rows: set[tuple[str, int]] = set()
        self._connection: sqlite3.Connection | None = None
        self._last_insert_id = 0
        if db_path != ":memory:":
            pathlib.Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    def initialize(self, schema_sql: str | None = None) -> None:
        """Create tables from ``schema_sql`` (the bundled row schema by default)."""
        if schema_sql is None:
            from rowkeeper.rows.schema import schema_sql as bundled_schema

            schema_sql = bundled_schema(self.table_prefix)
        conn = self._get_raw_connection()
        try:
            conn.executescript(schema_sql)
        except sqlite3.Error as exc:
            raise StorageError(f"Schema creation failed: {exc}") from exc

    def _get_raw_connection(self) -> sqlite3.Connection:
        """Return the shared connection, creating it if needed."""
        if self._connection is None:
            self._connection = sqlite3.connect(self.db_path, isolation_level=None)
            self._connection.row_factory = sqlite3.Row
            if self.db_path != ":memory:":
                self._connection.execute("PRAGMA journal_mode=WAL")
            self._connection.execute("PRAGMA foreign_keys=ON")
        return self._connection

    @contextlib.contextmanager
    def get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Yield the raw connection for ad-hoc queries."""
        yield self._get_raw_connection()

    @contextlib.contextmanager
    def transaction(self) -> Generator[Database, None, None]:
        """Run the block in a transaction.

        Commits on success, rolls back on exception. Nested use joins the
        outer transaction.
        """
        conn = self._get_raw_connection()
        if conn.in_transaction:
            yield self
            return
        conn.execute("BEGIN IMMEDIATE")
        try:
            yield self
            conn.execute("COMMIT")
        except Exception:
            conn.execute("ROLLBACK")
            raise
        finally:
            self.locked_rows.clear()

    # -- RowStorage --

    def execute(self, sql: str, params: tuple[Any, ...] = ()) -> bool:
        logger.debug("execute: %s %r", sql, params)
        try:
            cursor = self._get_raw_connection().execute(sql, params)
        except sqlite3.Error as exc:
            raise StorageError(f"Statement failed: {exc} [{sql}]") from exc
        if cursor.lastrowid:
            self._last_insert_id = cursor.lastrowid
        return True

    def fetch_one(self, sql: str, params: tuple[Any, ...] = ()) -> dict[str, Any] | None:
        logger.debug("fetch_one: %s %r", sql, params)
        try:
            row = self._get_raw_connection().execute(sql, params).fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"Query failed: {exc} [{sql}]") from exc
        return dict(row) if row is not None else None

    def last_insert_id(self) -> int:
        return self._last_insert_id

    def in_transaction(self) -> bool:
        return self._get_raw_connection().in_transaction

    def lock_row(self, table: str, row_id: int) -> None:
        if not self.in_transaction():
            logger.debug("lock_row(%s, %s) outside a transaction ignored", table, row_id)
            return
        self.locked_rows.add((table, row_id))

    def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
