"""Common utility functions."""

from typing import Any


def get_value(obj: Any, key: str, default: Any = None) -> Any:
    """Get value from dict or object attribute, falling back to default when missing or None."""
    if isinstance(obj, dict):
        value = obj.get(key)
    else:
        value = getattr(obj, key, None)
    return default if value is None else value
