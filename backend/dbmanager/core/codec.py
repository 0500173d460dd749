"""
Encoded-map codec for record payloads.

A record's field values are stored as one JSON object serialized to text.
Everything that parses, serializes or compares those payloads goes through
this module.
"""
import json
from typing import Any

from dbmanager.core.errors import CodecError

RESERVED_KEY = "id"
POSITION_KEY = "__position"
INTERNAL_PREFIX = "__"


def decode_values(text: str | None) -> dict[str, Any]:
    """
    Decode a stored payload into a field-name -> value map.

    Blank payloads decode to an empty map.

    Raises:
        CodecError: If the text is not a JSON object
    """
    if text is None or not text.strip():
        return {}
    try:
        values = json.loads(text)
    except json.JSONDecodeError as e:
        raise CodecError(f"Malformed record payload: {e}") from e
    if not isinstance(values, dict):
        raise CodecError(f"Record payload is a {type(values).__name__}, expected an object")
    return values


def encode_values(values: dict[str, Any]) -> str:
    """
    Serialize a field-name -> value map into payload text.

    Raises:
        CodecError: If a value cannot be represented as JSON
    """
    try:
        return json.dumps(values, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise CodecError(f"Values cannot be encoded: {e}") from e


def is_reserved_key(key: str) -> bool:
    """True for the reserved identifier key, in any letter case."""
    return key.lower() == RESERVED_KEY


def without_reserved_keys(values: dict[str, Any]) -> dict[str, Any]:
    """Copy of values with every reserved-key entry dropped."""
    return {k: v for k, v in values.items() if not is_reserved_key(k)}


def is_internal_key(key: str) -> bool:
    """True for bookkeeping keys such as the positional handle."""
    return key.startswith(INTERNAL_PREFIX)


def value_to_text(value: Any) -> str:
    """
    Canonical string form used for equality filtering.

    Booleans render as true/false, None as null and nested values as compact
    JSON, so a filter of {"active": "true"} matches a stored boolean.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


def matches_filter(values: dict[str, Any], filter: dict[str, Any]) -> bool:
    """Every filter key is present in values with an equal canonical string form."""
    for key, expected in filter.items():
        if key not in values:
            return False
        if value_to_text(values[key]) != value_to_text(expected):
            return False
    return True
