"""Shared utility functions for rowkeeper."""
from __future__ import annotations

import json


def safe_json(value, default=None):
    """Deserialize a JSON string if needed, or return default.

    Handles the common pattern where SQLite columns may contain JSON strings,
    Python objects, or NULL values.
    """
    if value is None:
        return default if default is not None else {}
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8", errors="replace")
    if isinstance(value, str):
        if not value:
            return default if default is not None else {}
        try:
            return json.loads(value)
        except (json.JSONDecodeError, TypeError):
            return default if default is not None else {}
    return value


def idval(value) -> int:
    """Coerce an identifier-like value to int, 0 when it is not one."""
    if isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
