"""Per-instance bookkeeping of replaced and adjusted properties."""
from __future__ import annotations

from typing import Union

from rowkeeper.models.property_scheme import PropertyScheme

Number = Union[int, float]


class ChangeTracker:
    """Records what happened to a row's properties since the last save.

    ``changed`` holds names written with a plain set, in first-change order.
    ``adjusted`` maps names to the accumulated delta still to be applied by
    the database. A name never sits in both.
    """

    def __init__(self) -> None:
        self.changed: dict[str, None] = {}
        self.adjusted: dict[str, Number] = {}

    def __repr__(self) -> str:
        return f"ChangeTracker(changed={list(self.changed)}, adjusted={self.adjusted})"

    def mark_changed(self, name: str) -> None:
        self.changed[name] = None

    def add_delta(self, name: str, delta: Number) -> Number:
        """Accumulate ``delta`` for ``name`` and return the pending total."""
        self.adjusted[name] = self.adjusted.get(name, 0) + delta
        return self.adjusted[name]

    def is_changed(self, name: str) -> bool:
        return name in self.changed

    def is_adjusted(self, name: str) -> bool:
        return name in self.adjusted

    def is_dirty(self) -> bool:
        return bool(self.changed) or bool(self.adjusted)

    def pending_delta(self, name: str) -> Number:
        return self.adjusted.get(name, 0)

    def field_trigger(self, field: str, scheme: PropertyScheme) -> str | None:
        """Name of a tracked property that touches ``field``, or None.

        Plain changes are checked first, then adjustments.
        """
        touching = scheme.properties_touching(field)
        for name in (*self.changed, *self.adjusted):
            if name in touching:
                return name
        return None

    def clear(self) -> None:
        self.changed.clear()
        self.adjusted.clear()
