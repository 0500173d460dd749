"""
Field type tags and their coercion functions.

Each tag owns one coercer that either returns the canonical stored value or
raises InvalidValueError. None passes through every coercer as an explicit null.
"""
import json
import math
import re
from enum import Enum
from typing import Any, Callable, Optional

from dbmanager.core.errors import InvalidArgumentError, InvalidValueError

_INTEGER_TEXT = re.compile(r"[+-]?\d+")


class FieldType(str, Enum):
    """Closed set of declarable field types."""
    STRING = "STRING"
    INTEGER = "INTEGER"
    DOUBLE = "DOUBLE"
    BOOLEAN = "BOOLEAN"
    JSON = "JSON"

    @property
    def display_name(self) -> str:
        """Human readable label for pickers."""
        return _DISPLAY_NAMES[self]

    @classmethod
    def parse(cls, raw: str) -> "FieldType":
        """
        Resolve a type tag case-insensitively.

        Raises:
            InvalidArgumentError: If the tag is not one of the five types
        """
        try:
            return cls(raw.strip().upper())
        except (AttributeError, ValueError):
            raise InvalidArgumentError(f"Unsupported field type: {raw!r}")


_DISPLAY_NAMES = {
    FieldType.STRING: "Text",
    FieldType.INTEGER: "Integer",
    FieldType.DOUBLE: "Decimal",
    FieldType.BOOLEAN: "Boolean",
    FieldType.JSON: "JSON",
}


def _reject(value: Any, field_type: FieldType) -> InvalidValueError:
    return InvalidValueError(
        f"{value!r} ({type(value).__name__}) is not compatible with {field_type.value}"
    )


def coerce_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    raise _reject(value, FieldType.STRING)


def coerce_integer(value: Any) -> int:
    # bool is an int subclass but never a valid integer value here
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and _INTEGER_TEXT.fullmatch(value):
        return int(value)
    raise _reject(value, FieldType.INTEGER)


def coerce_double(value: Any) -> float:
    # NaN and infinities have no JSON form; "1_000" is a Python-only literal
    result = None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        result = float(value)
    elif isinstance(value, str) and "_" not in value:
        try:
            result = float(value)
        except ValueError:
            pass
    if result is None or not math.isfinite(result):
        raise _reject(value, FieldType.DOUBLE)
    return result


def coerce_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise _reject(value, FieldType.BOOLEAN)


def coerce_json(value: Any) -> Any:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        try:
            json.dumps(value)
        except (TypeError, ValueError):
            raise _reject(value, FieldType.JSON)
        return value
    raise _reject(value, FieldType.JSON)


COERCERS: dict[FieldType, Callable[[Any], Any]] = {
    FieldType.STRING: coerce_string,
    FieldType.INTEGER: coerce_integer,
    FieldType.DOUBLE: coerce_double,
    FieldType.BOOLEAN: coerce_boolean,
    FieldType.JSON: coerce_json,
}


def coerce_value(field_type: FieldType, value: Any) -> Optional[Any]:
    """
    Validate a value against its declared type and return the stored form.

    Args:
        field_type: Declared type of the target field
        value: Raw value from the caller

    Returns:
        The canonical value (strings converted to int/float/bool as needed)

    Raises:
        InvalidValueError: If the value does not satisfy the type
    """
    if value is None:
        return None
    return COERCERS[field_type](value)
