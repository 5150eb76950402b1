from __future__ import annotations

from rowkeeper.rows.fleet import Coordinates, Fleet
from rowkeeper.rows.schema import schema_sql
from rowkeeper.rows.unit import LocationType, Unit

ROW_TYPES = {
    "unit": Unit,
    "fleet": Fleet,
}

__all__ = [
    "Coordinates",
    "Fleet",
    "LocationType",
    "ROW_TYPES",
    "Unit",
    "schema_sql",
]
