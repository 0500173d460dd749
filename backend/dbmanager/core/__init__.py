"""
Core module - Payload codec, field type coercion, errors and logging setup.
"""
from dbmanager.core.codec import (
    decode_values,
    encode_values,
    matches_filter,
    value_to_text,
)
from dbmanager.core.errors import (
    DataLayerError,
    NotFoundError,
    AlreadyExistsError,
    InvalidArgumentError,
    InvalidValueError,
    PartialFailureError,
    StorageUnavailableError,
    CodecError,
)
from dbmanager.core.field_types import FieldType, coerce_value
from dbmanager.core.logging_setup import setup_logging

__all__ = [
    "decode_values",
    "encode_values",
    "matches_filter",
    "value_to_text",
    "DataLayerError",
    "NotFoundError",
    "AlreadyExistsError",
    "InvalidArgumentError",
    "InvalidValueError",
    "PartialFailureError",
    "StorageUnavailableError",
    "CodecError",
    "FieldType",
    "coerce_value",
    "setup_logging",
]
