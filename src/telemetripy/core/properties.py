"""Typed readers over a log event's property bag.

An absent key is never an error: each reader returns a documented default.
A present value that cannot be read as the requested type raises
``PropertyFormatError`` (or ``OverflowError`` for out-of-range durations).
"""

import math
from collections.abc import Mapping
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, NamedTuple, TypeVar

from telemetripy.core.exceptions import PropertyFormatError
from telemetripy.core.formats import (
    DEFAULT_TIMESTAMP,
    format_duration,
    format_timestamp,
    parse_duration,
    parse_timestamp,
)

T = TypeVar("T")


class DoubleLookup(NamedTuple):
    """Result of reading a floating point property.

    Attributes:
        present: Whether the key exists in the property bag.
        value: The numeric value, or NaN when absent or not numeric.
    """

    present: bool
    value: float

    @property
    def is_numeric(self) -> bool:
        return self.present and not math.isnan(self.value)


def _require_key(key: str) -> None:
    if not key or not key.strip():
        raise ValueError("Requires a non-blank property key")


def get_as_raw_string(properties: Mapping[str, Any], key: str) -> str | None:
    """Read a property as its raw text, without any quoting.

    Args:
        properties: The property bag.
        key: Property key.

    Returns:
        The text value, or None when the key is absent or holds None.
    """
    _require_key(key)
    value = properties.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, timedelta):
        return format_duration(value)
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def get_as_timedelta(properties: Mapping[str, Any], key: str) -> timedelta:
    """Read a property as a duration; zero when absent."""
    _require_key(key)
    value = properties.get(key)
    if value is None:
        return timedelta(0)
    if isinstance(value, timedelta):
        return value
    return parse_duration(str(value))


def get_as_datetime(properties: Mapping[str, Any], key: str) -> datetime:
    """Read a property as a timestamp; ``DEFAULT_TIMESTAMP`` when absent."""
    _require_key(key)
    value = properties.get(key)
    if value is None:
        return DEFAULT_TIMESTAMP
    if isinstance(value, datetime):
        return value
    return parse_timestamp(str(value))


def get_as_dictionary(properties: Mapping[str, Any], key: str) -> dict[str, str]:
    """Read a nested mapping property with its values as text.

    Args:
        properties: The property bag.
        key: Property key.

    Returns:
        A new dict; empty when the key is absent or not a mapping.
    """
    _require_key(key)
    value = properties.get(key)
    if not isinstance(value, Mapping):
        return {}
    return {
        str(name): text
        for name in value
        if (text := get_as_raw_string(value, str(name))) is not None
    }


def lookup_double(properties: Mapping[str, Any], key: str) -> DoubleLookup:
    """Read a property as a float, telling absence apart from bad input.

    Numeric values and numeric text are read; anything else yields NaN
    with ``present`` set.
    """
    _require_key(key)
    if key not in properties or properties[key] is None:
        return DoubleLookup(present=False, value=math.nan)
    value = properties[key]
    if isinstance(value, bool):
        return DoubleLookup(present=True, value=math.nan)
    if isinstance(value, int | float):
        return DoubleLookup(present=True, value=float(value))
    if isinstance(value, str):
        try:
            return DoubleLookup(present=True, value=float(value))
        except ValueError:
            return DoubleLookup(present=True, value=math.nan)
    return DoubleLookup(present=True, value=math.nan)


def get_as_double(properties: Mapping[str, Any], key: str) -> float:
    """Read a property as a float; NaN when absent or not numeric."""
    return lookup_double(properties, key).value


def get_as_bool(properties: Mapping[str, Any], key: str) -> bool:
    """Read a property as a boolean; False when absent.

    Raises:
        PropertyFormatError: If the value is neither ``true`` nor ``false``.
    """
    _require_key(key)
    value = properties.get(key)
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text == "true":
        return True
    if text == "false":
        return False
    raise PropertyFormatError(f"Property '{key}' value '{value}' is not a boolean")


def get_as_object(
    properties: Mapping[str, Any],
    key: str,
    expected_type: type[T],
    default: T | None = None,
) -> T | None:
    """Read a property that already holds an instance of ``expected_type``.

    Returns ``default`` when the key is absent or holds another type.
    """
    _require_key(key)
    value = properties.get(key)
    if isinstance(value, expected_type):
        return value
    return default
