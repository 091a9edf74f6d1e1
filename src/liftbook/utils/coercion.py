"""Lenient conversions for client-supplied values."""

import re
from typing import Any

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")


def coerce_int(value: Any, default: int | None = 0) -> int | None:
    """Convert a loosely typed value to an integer.

    Integers pass through, floats are truncated, and strings use their
    leading integer (``"12kg"`` -> 12). Anything else gives ``default``.

    Examples:
        >>> coerce_int("105")
        105
        >>> coerce_int("abc")
        0
        >>> coerce_int(None, default=None) is None
        True
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return default
        return int(value)
    if isinstance(value, str):
        match = _INT_PREFIX.match(value)
        if match:
            return int(match.group(1))
    return default


def first_present(data: dict, *keys: str, default: Any = None) -> Any:
    """Return the value of the first key present in ``data``.

    Lets payloads use either snake_case or camelCase field names.
    """
    for key in keys:
        if key in data:
            return data[key]
    return default


def coerce_float(value: Any, default: float = 0.0) -> float:
    """Convert a loosely typed value to a float.

    Numbers pass through and numeric strings are parsed. NaN, infinities and
    anything unparseable give ``default``.
    """
    if isinstance(value, bool):
        return default
    if not isinstance(value, (int, float, str)):
        return default
    try:
        number = float(value)
    except (OverflowError, ValueError):
        return default
    if number != number or number in (float("inf"), float("-inf")):
        return default
    return number
