"""Row-persistence engine: scheme-driven rows with dirty tracking and delta updates."""
from __future__ import annotations

from rowkeeper.diagnostics import Diagnostics
from rowkeeper.engine.db_row import DBRow, Saveable
from rowkeeper.errors import (
    InconsistentState,
    InvalidAdjustment,
    InvalidIdentifier,
    PropertyAccessError,
    PropertyLocked,
    PropertyNotFound,
    PropertyReadOnly,
    RowKeeperError,
    StorageError,
)
from rowkeeper.models.property_scheme import PropertyDescriptor, PropertyScheme
from rowkeeper.storage.base import RowStorage
from rowkeeper.storage.database import Database

__version__ = "0.1.0"

__all__ = [
    "DBRow",
    "Database",
    "Diagnostics",
    "InconsistentState",
    "InvalidAdjustment",
    "InvalidIdentifier",
    "PropertyAccessError",
    "PropertyDescriptor",
    "PropertyLocked",
    "PropertyNotFound",
    "PropertyReadOnly",
    "PropertyScheme",
    "RowKeeperError",
    "RowStorage",
    "Saveable",
    "StorageError",
]
