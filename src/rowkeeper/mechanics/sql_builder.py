"""Single-row SQL statements built from field sets.

Values are always bound parameters (``?`` placeholders); only identifiers
are rendered into the text, and those are validated and quoted first.
"""
from __future__ import annotations

import re
from typing import Any, Iterator, NamedTuple

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class Statement(NamedTuple):
    sql: str
    params: tuple[Any, ...] = ()


class FieldSet:
    """Ordered ``field -> value`` mapping with per-field delta flags.

    Putting a field again overwrites both its value and its delta flag but
    keeps its original position.
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}
        self._deltas: set[str] = set()

    def put(self, field: str, value: Any, delta: bool = False) -> None:
        self._values[field] = value
        if delta:
            self._deltas.add(field)
        else:
            self._deltas.discard(field)

    def __getitem__(self, field: str) -> Any:
        return self._values[field]

    def __contains__(self, field: object) -> bool:
        return field in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"FieldSet({self._values}, deltas={sorted(self._deltas)})"

    def is_delta(self, field: str) -> bool:
        return field in self._deltas

    def items(self):
        return self._values.items()

    def as_dict(self) -> dict[str, Any]:
        return dict(self._values)


def quote_identifier(name: str) -> str:
    if not _IDENTIFIER_RE.match(name):
        raise ValueError(f"Unsafe SQL identifier: '{name}'")
    return f'"{name}"'


def select_by_id(table: str, id_field: str, row_id: int) -> Statement:
    return Statement(
        f"SELECT * FROM {quote_identifier(table)} "
        f"WHERE {quote_identifier(id_field)} = ? LIMIT 1",
        (row_id,),
    )


def insert(table: str, fields: FieldSet) -> Statement:
    """INSERT over every field in the set; delta flags are ignored."""
    if not fields:
        return Statement(f"INSERT INTO {quote_identifier(table)} DEFAULT VALUES")
    columns = ", ".join(quote_identifier(f) for f in fields)
    placeholders = ", ".join("?" for _ in range(len(fields)))
    return Statement(
        f"INSERT INTO {quote_identifier(table)} ({columns}) VALUES ({placeholders})",
        tuple(fields[f] for f in fields),
    )


def set_clause(fields: FieldSet) -> tuple[str, tuple[Any, ...]]:
    """Render ``SET`` assignments; delta fields become ``f = f + (?)``."""
    parts = []
    params = []
    for field, value in fields.items():
        column = quote_identifier(field)
        if fields.is_delta(field):
            # Parentheses keep negative deltas unambiguous.
            parts.append(f"{column} = {column} + (?)")
        else:
            parts.append(f"{column} = ?")
        params.append(value)
    return ", ".join(parts), tuple(params)


def update(table: str, id_field: str, row_id: int, fields: FieldSet) -> Statement | None:
    """UPDATE the given fields of one row, or None when there is nothing to set."""
    if not fields:
        return None
    assignments, params = set_clause(fields)
    return Statement(
        f"UPDATE {quote_identifier(table)} SET {assignments} "
        f"WHERE {quote_identifier(id_field)} = ?",
        (*params, row_id),
    )


def delete(table: str, id_field: str, row_id: int) -> Statement:
    return Statement(
        f"DELETE FROM {quote_identifier(table)} WHERE {quote_identifier(id_field)} = ?",
        (row_id,),
    )
