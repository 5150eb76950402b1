"""Exception hierarchy for the row-persistence engine."""
from __future__ import annotations


class RowKeeperError(Exception):
    """Base class for every error raised by rowkeeper."""


class PropertyAccessError(RowKeeperError):
    """A property was accessed in a way its scheme does not allow."""

    def __init__(self, owner: str, property_name: str, message: str) -> None:
        self.owner = owner
        self.property_name = property_name
        super().__init__(f"{owner}.{property_name}: {message}")


class PropertyNotFound(PropertyAccessError):
    def __init__(self, owner: str, property_name: str) -> None:
        super().__init__(owner, property_name, "property is not declared in the scheme")


class PropertyReadOnly(PropertyAccessError):
    def __init__(self, owner: str, property_name: str) -> None:
        super().__init__(owner, property_name, "property is read-only")


class PropertyLocked(PropertyAccessError):
    """Plain set attempted while an adjustment is still pending."""

    def __init__(self, owner: str, property_name: str) -> None:
        super().__init__(
            owner, property_name,
            "property already adjusted, save before setting it",
        )


class InvalidAdjustment(PropertyAccessError):
    pass


class InvalidIdentifier(RowKeeperError):
    """Load requested with an id that is not a positive integer."""


class InconsistentState(RowKeeperError):
    """A defensive lifecycle check failed (raised only in strict mode)."""


class StorageError(RowKeeperError):
    """The storage collaborator rejected a statement."""
