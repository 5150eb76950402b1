"""Fleet row with attached unit stacks."""
from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict

from rowkeeper.engine.db_row import DBRow
from rowkeeper.mechanics.codec import bool_out, json_in, json_out, to_bool, to_float, to_int, to_str
from rowkeeper.mechanics.sql_builder import FieldSet
from rowkeeper.models.property_scheme import PropertyDescriptor, PropertyScheme
from rowkeeper.rows.unit import LocationType, Unit

_TARGET_FIELDS = ("fleet_end_galaxy", "fleet_end_system", "fleet_end_planet")


class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    galaxy: int = 0
    system: int = 0
    planet: int = 0

    def __str__(self) -> str:
        return f"[{self.galaxy}:{self.system}:{self.planet}]"


class Fleet(DBRow):
    table = "fleets"
    id_field = "fleet_id"
    scheme = PropertyScheme(
        PropertyDescriptor(name="owner_id", storage_field="fleet_owner",
                           default=0, input_conversion=to_int),
        PropertyDescriptor(name="name", storage_field="fleet_name",
                           default="", input_conversion=to_str),
        PropertyDescriptor(name="mission", storage_field="fleet_mission",
                           default=0, input_conversion=to_int),
        PropertyDescriptor(name="amount", storage_field="fleet_amount",
                           default=0, input_conversion=to_int),
        PropertyDescriptor(name="returning", storage_field="fleet_mess",
                           default=False, input_conversion=to_bool,
                           output_conversion=bool_out),
        PropertyDescriptor(name="target", default=Coordinates(),
                           extractor="_extract_target", injector="_inject_target",
                           linked_fields=_TARGET_FIELDS),
        PropertyDescriptor(name="metal", storage_field="fleet_resource_metal",
                           default=0.0, input_conversion=to_float),
        PropertyDescriptor(name="crystal", storage_field="fleet_resource_crystal",
                           default=0.0, input_conversion=to_float),
        PropertyDescriptor(name="deuterium", storage_field="fleet_resource_deuterium",
                           default=0.0, input_conversion=to_float),
        PropertyDescriptor(name="options", storage_field="fleet_options",
                           default_factory=dict, input_conversion=json_in,
                           output_conversion=json_out),
        PropertyDescriptor(name="cargo", read_only=True, getter="_get_cargo"),
    )

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.units: list[Unit] = []

    def is_empty(self) -> bool:
        return (self.get("amount") or 0) <= 0

    def add_unit(self, unit: Unit) -> None:
        """Attach a unit stack; it is saved whenever the fleet is."""
        self.units.append(unit)
        self.add_dependent(unit)
        if not self.is_new():
            self._place(unit)

    def insert(self) -> int:
        new_id = super().insert()
        if new_id:
            for unit in self.units:
                self._place(unit)
        return new_id

    def lock(self) -> None:
        super().lock()
        for unit in self.units:
            if not unit.is_new():
                unit.lock()

    def _place(self, unit: Unit) -> None:
        location = (LocationType.FLEET, self.db_id)
        if unit.get("location") != location:
            unit.place(*location)

    def _extract_target(self, row: Mapping[str, Any]) -> None:
        galaxy, system, planet = (to_int(row.get(f)) for f in _TARGET_FIELDS)
        self._set_stored("target", Coordinates(galaxy=galaxy, system=system, planet=planet))

    def _inject_target(self, fields: FieldSet) -> None:
        target = self.get("target") or Coordinates()
        for field, value in zip(_TARGET_FIELDS, (target.galaxy, target.system, target.planet)):
            fields.put(field, value)

    def _get_cargo(self) -> float:
        return sum(self._get_stored(name) or 0 for name in ("metal", "crystal", "deuterium"))

    @property
    def target(self) -> Coordinates:
        return self.get("target")

    @target.setter
    def target(self, value: Coordinates) -> None:
        self.set("target", value)
