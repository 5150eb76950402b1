"""Base row object: controlled property access, dirty tracking and CRUD.

A concrete row declares its ``table``, ``id_field`` and ``scheme``. All
property access goes through ``get`` / ``set`` / ``adjust`` so that every
write is tracked; ``save`` then turns the tracked changes into exactly one
INSERT, UPDATE or DELETE.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Mapping, Protocol, runtime_checkable

from rowkeeper.diagnostics import Diagnostics
from rowkeeper.errors import (
    InvalidAdjustment,
    InvalidIdentifier,
    PropertyLocked,
    PropertyReadOnly,
)
from rowkeeper.mechanics import codec, sql_builder
from rowkeeper.mechanics.change_tracker import ChangeTracker, Number
from rowkeeper.mechanics.sql_builder import FieldSet
from rowkeeper.models.property_scheme import PropertyDescriptor, PropertyScheme
from rowkeeper.storage.base import RowStorage
from rowkeeper.utils import idval

logger = logging.getLogger(__name__)


@runtime_checkable
class Saveable(Protocol):
    def save(self) -> None: ...


class DBRow(ABC):
    """One table row mapped onto logical properties."""

    table: ClassVar[str] = ""
    id_field: ClassVar[str] = "id"
    scheme: ClassVar[PropertyScheme] = PropertyScheme()

    # Hint for an external cache layer; not used here.
    cacheable: bool = True

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "scheme" in cls.__dict__:
            cls.scheme = cls.scheme.with_owner(cls.__name__)

    def __init__(self, storage: RowStorage, diagnostics: Diagnostics | None = None) -> None:
        self.storage = storage
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.db_id = 0
        self.tracker = ChangeTracker()
        self.dependents: list[Saveable] = []
        self.skip_lock = False
        self._values: dict[str, Any] = {d.name: d.initial_value() for d in self.scheme}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(db_id={self.db_id})"

    @property
    def table_name(self) -> str:
        return self.storage.table_name(self.table)

    # -- Accessors --

    def get(self, name: str) -> Any:
        descriptor = self.scheme[name]
        if descriptor.getter:
            return getattr(self, descriptor.getter)()
        return self._values.get(name)

    def set(self, name: str, value: Any) -> None:
        descriptor = self.scheme[name]
        if descriptor.read_only:
            raise PropertyReadOnly(type(self).__name__, name)
        if self.tracker.is_adjusted(name):
            raise PropertyLocked(type(self).__name__, name)
        self.tracker.mark_changed(name)
        self._assign(descriptor, value)

    def adjust(self, name: str, delta: Number) -> None:
        """Schedule ``field = field + delta`` for the next update.

        The in-memory value is left as loaded. On a new row, or when the
        property was already set in this cycle, the delta is folded into the
        live value instead since a literal write is already pending.
        """
        descriptor = self.scheme[name]
        owner = type(self).__name__
        if descriptor.read_only:
            raise PropertyReadOnly(owner, name)
        if descriptor.is_virtual:
            raise InvalidAdjustment(owner, name, "only stored properties can be adjusted")
        if not codec.is_numeric(delta):
            raise InvalidAdjustment(owner, name, f"delta must be numeric, got {delta!r}")
        current = self.get(name)
        if not codec.is_numeric(current):
            raise InvalidAdjustment(owner, name, f"value {current!r} is not numeric")

        if self.is_new() or self.tracker.is_changed(name):
            self.tracker.mark_changed(name)
            self._assign(descriptor, current + delta)
            return
        self.tracker.add_delta(name, delta)

    def to_dict(self) -> dict[str, Any]:
        return {name: self.get(name) for name in self.scheme.names}

    def _assign(self, descriptor: PropertyDescriptor, value: Any) -> None:
        if descriptor.setter:
            getattr(self, descriptor.setter)(value)
        else:
            self._values[descriptor.name] = value

    def _get_stored(self, name: str) -> Any:
        """Raw internal value, for custom getters and setters."""
        return self._values.get(name)

    def _set_stored(self, name: str, value: Any) -> None:
        self._values[name] = value

    # -- Lifecycle --

    def is_new(self) -> bool:
        return self.db_id == 0

    @abstractmethod
    def is_empty(self) -> bool:
        """True if the row holds nothing worth persisting."""

    def add_dependent(self, row: Saveable) -> None:
        """Save ``row`` after this one on every ``save``."""
        self.dependents.append(row)

    def lock(self) -> None:
        """Acquire the row lock for the current transaction."""
        self.storage.lock_row(self.table_name, self.db_id)

    def load(self, db_id: Any, skip_lock: bool = False) -> bool:
        """Populate from the stored row ``db_id``; False if nothing was loaded."""
        row_id = idval(db_id)
        if row_id <= 0:
            self.diagnostics.report(
                f"{type(self).__name__}.load: id not positive = {db_id!r}",
                InvalidIdentifier,
            )
            return False

        self.db_id = row_id
        self.skip_lock = skip_lock
        try:
            if not skip_lock:
                self.lock()
            statement = sql_builder.select_by_id(self.table_name, self.id_field, row_id)
            row = self.storage.fetch_one(*statement)
        finally:
            self.skip_lock = False
        if row is None:
            logger.debug("%s.load: no row with id %s", type(self).__name__, row_id)
            return False

        if self.tracker.is_dirty():
            logger.debug("%s.load: discarding pending %r", type(self).__name__, self.tracker)
            self.tracker.clear()
        self.parse_row(row)
        return True

    def save(self) -> None:
        """Insert, update or delete depending on ``is_new`` and ``is_empty``."""
        if self.is_new():
            if self.is_empty():
                self.diagnostics.report(f"{type(self).__name__}.save: object is empty on insert")
            self.insert()
        elif self.is_empty():
            self.delete()
        else:
            if not self.storage.in_transaction():
                self.diagnostics.report(
                    f"{type(self).__name__}.save: transaction should always be started on update"
                )
            self.update()

        for row in self.dependents:
            row.save()

        self.tracker.clear()

    def insert(self) -> int:
        if not self.is_new():
            self.diagnostics.report(
                f"{type(self).__name__}.insert: record already has id {self.db_id}"
            )
        statement = sql_builder.insert(self.table_name, self.make_field_set())
        new_id = self.storage.last_insert_id() if self.storage.execute(*statement) else 0
        self.db_id = idval(new_id)
        if not self.db_id:
            self.diagnostics.report(f"{type(self).__name__}.insert: error saving record")
        return self.db_id

    def update(self) -> bool:
        if self.is_new():
            self.diagnostics.report(f"{type(self).__name__}.update: record has no id")
        statement = sql_builder.update(
            self.table_name, self.id_field, self.db_id, self.changed_field_set(),
        )
        if statement is None:
            return True
        return self.storage.execute(*statement)

    def delete(self) -> bool:
        if self.is_new():
            self.diagnostics.report(f"{type(self).__name__}.delete: record has no id")
        result = self.storage.execute(
            *sql_builder.delete(self.table_name, self.id_field, self.db_id)
        )
        self.db_id = 0
        return result

    # -- Row <-> properties --

    def parse_row(self, row: Mapping[str, Any]) -> None:
        """Fill properties from a raw stored row without tracking changes."""
        for descriptor in self.scheme:
            if descriptor.extractor:
                getattr(self, descriptor.extractor)(row)
                continue
            if descriptor.read_only or descriptor.is_virtual:
                continue
            value = codec.decode_value(descriptor, row.get(descriptor.storage_field))
            self._assign(descriptor, value)

    def make_field_set(self, for_update: bool = False) -> FieldSet:
        """Every writable field with its stored value.

        For updates, adjusted properties contribute their pending delta
        flagged for additive rendering.
        """
        fields = FieldSet()
        for descriptor in self.scheme:
            if descriptor.injector:
                getattr(self, descriptor.injector)(fields)
                continue
            if descriptor.is_virtual or descriptor.read_only:
                continue

            is_delta = for_update and self.tracker.is_adjusted(descriptor.name)
            if is_delta:
                value = self.tracker.pending_delta(descriptor.name)
            else:
                value = self.get(descriptor.name)
            value = codec.encode_value(descriptor, value)
            if descriptor.output_method:
                value = getattr(self, descriptor.output_method)(value)
            fields.put(descriptor.storage_field, value, delta=is_delta)
        return fields

    def changed_field_set(self) -> FieldSet:
        """The update field set restricted to fields touched since the last save."""
        full = self.make_field_set(for_update=True)
        changed = FieldSet()
        for field, value in full.items():
            if self.tracker.field_trigger(field, self.scheme) is None:
                continue
            changed.put(field, value, delta=full.is_delta(field))
        return changed
