"""Unit stack row: a count of one unit type at one location."""
from __future__ import annotations

from enum import IntEnum

from rowkeeper.engine.db_row import DBRow
from rowkeeper.mechanics.codec import to_int
from rowkeeper.models.property_scheme import PropertyDescriptor, PropertyScheme


class LocationType(IntEnum):
    NONE = 0
    PLANET = 1
    FLEET = 2
    USER = 3


class Unit(DBRow):
    table = "unit"
    id_field = "unit_id"
    scheme = PropertyScheme(
        PropertyDescriptor(name="player_owner_id", storage_field="unit_player_id",
                           default=0, input_conversion=to_int),
        PropertyDescriptor(name="location_type", storage_field="unit_location_type",
                           default=LocationType.NONE, setter="_set_location_type",
                           output_conversion=int),
        PropertyDescriptor(name="location_id", storage_field="unit_location_id",
                           default=0, input_conversion=to_int),
        PropertyDescriptor(name="type", storage_field="unit_type",
                           default=0, input_conversion=to_int),
        PropertyDescriptor(name="snid", storage_field="unit_snid",
                           default=0, input_conversion=to_int),
        PropertyDescriptor(name="count", storage_field="unit_level",
                           default=0, input_conversion=to_int),
        PropertyDescriptor(name="time_start", storage_field="unit_time_start",
                           default=0, input_conversion=to_int),
        PropertyDescriptor(name="location", read_only=True, getter="_get_location"),
    )

    def is_empty(self) -> bool:
        return (self.get("count") or 0) <= 0

    def _set_location_type(self, value) -> None:
        code = to_int(value)
        try:
            location_type = LocationType(code)
        except ValueError:
            self.diagnostics.report(
                f"Unit #{self.db_id}: unknown location type {code}, using NONE"
            )
            location_type = LocationType.NONE
        self._set_stored("location_type", location_type)

    def _get_location(self) -> tuple[LocationType, int]:
        return self._get_stored("location_type"), self._get_stored("location_id")

    # Typed accessors

    @property
    def snid(self) -> int:
        return self.get("snid")

    @property
    def count(self) -> int:
        return self.get("count")

    @count.setter
    def count(self, value: int) -> None:
        self.set("count", value)

    def place(self, location_type: LocationType, location_id: int) -> None:
        self.set("location_type", location_type)
        self.set("location_id", location_id)
