"""Utility functions."""
from typing import Any, Mapping, Optional


def to_int(s: Any) -> Optional[int]:
    """
    Convert a value to int, returning None if conversion fails.

    Goes through float so "3.0" parses; fractional values round to nearest.
    """
    try:
        return int(round(float(s))) if s is not None else None
    except Exception:
        return None


def to_float(s: Any) -> Optional[float]:
    """Convert a value to float, returning None if conversion fails."""
    try:
        return float(s) if s is not None else None
    except Exception:
        return None


def first_present(data: Mapping[str, Any], *keys: str) -> Any:
    """Return the value of the first key that is present and not None."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def without_keys(data: Mapping[str, Any], *keys: str) -> dict:
    """Shallow copy of ``data`` with ``keys`` removed."""
    return {k: v for k, v in data.items() if k not in keys}
