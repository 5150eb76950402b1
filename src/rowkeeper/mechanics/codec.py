"""Field codec: pure conversions between stored values and typed properties.

No I/O. Every converter accepts ``None`` (a missing or NULL column) and maps
it to the zero value of its type, so reconstruction never fails on sparse
rows.
"""
from __future__ import annotations

import json
from typing import Any

from rowkeeper.models.property_scheme import PropertyDescriptor
from rowkeeper.utils import safe_json


def to_int(value: Any) -> int:
    if value is None or value == "":
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return int(float(value))


def to_float(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    return float(value)


def to_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")
    return str(value)


def to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in ("", "0", "false", "no")
    return bool(value)


def bool_out(value: Any) -> int:
    return 1 if value else 0


def json_in(value: Any) -> Any:
    """Stored JSON text to a Python object (``{}`` when empty or malformed)."""
    return safe_json(value, {})


def json_out(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value, sort_keys=True)


def decode_value(descriptor: PropertyDescriptor, raw: Any) -> Any:
    """Apply the descriptor's input conversion to a raw stored value."""
    if descriptor.input_conversion is None:
        return raw
    return descriptor.input_conversion(raw)


def encode_value(descriptor: PropertyDescriptor, value: Any) -> Any:
    """Apply the descriptor's output conversion to a property value."""
    if descriptor.output_conversion is None:
        return value
    return descriptor.output_conversion(value)


def is_numeric(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
