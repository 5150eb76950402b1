from __future__ import annotations

from rowkeeper.storage.base import RowStorage
from rowkeeper.storage.database import Database

__all__ = [
    "Database",
    "RowStorage",
]
