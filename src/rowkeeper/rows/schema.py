"""DDL for the bundled row types."""
from __future__ import annotations

_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS {prefix}unit (
    unit_id             INTEGER PRIMARY KEY AUTOINCREMENT,
    unit_player_id      INTEGER NOT NULL DEFAULT 0,
    unit_location_type  INTEGER NOT NULL DEFAULT 0,
    unit_location_id    INTEGER NOT NULL DEFAULT 0,
    unit_type           INTEGER NOT NULL DEFAULT 0,
    unit_snid           INTEGER NOT NULL DEFAULT 0,
    unit_level          INTEGER NOT NULL DEFAULT 0,
    unit_time_start     INTEGER NOT NULL DEFAULT 0
);

CREATE INDEX IF NOT EXISTS {prefix}idx_unit_location
    ON {prefix}unit (unit_location_type, unit_location_id);

CREATE TABLE IF NOT EXISTS {prefix}fleets (
    fleet_id                INTEGER PRIMARY KEY AUTOINCREMENT,
    fleet_owner             INTEGER NOT NULL DEFAULT 0,
    fleet_name              TEXT NOT NULL DEFAULT '',
    fleet_mission           INTEGER NOT NULL DEFAULT 0,
    fleet_amount            INTEGER NOT NULL DEFAULT 0,
    fleet_mess              INTEGER NOT NULL DEFAULT 0,
    fleet_end_galaxy        INTEGER NOT NULL DEFAULT 0,
    fleet_end_system        INTEGER NOT NULL DEFAULT 0,
    fleet_end_planet        INTEGER NOT NULL DEFAULT 0,
    fleet_resource_metal    REAL NOT NULL DEFAULT 0,
    fleet_resource_crystal  REAL NOT NULL DEFAULT 0,
    fleet_resource_deuterium REAL NOT NULL DEFAULT 0,
    fleet_options           TEXT
);
"""


def schema_sql(table_prefix: str = "") -> str:
    return _SCHEMA_SQL.format(prefix=table_prefix)
