"""
String coercion for values placed into paths, queries, forms and cookies.
"""
import json
from typing import Any


def coerce_to_string(value: Any) -> str:
    """Convert a param value to the string placed in a path, query or form."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, bytes):
        return value.decode("utf-8")
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)
