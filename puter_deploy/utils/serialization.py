"""Serialization helpers for log and error messages."""
import json
from typing import Any


def safe_json(value: Any) -> str:
    """Render a value for error messages without ever failing."""
    try:
        return json.dumps(value, default=str)
    except (TypeError, ValueError):
        return str(value)
