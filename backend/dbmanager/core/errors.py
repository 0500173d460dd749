"""
Error taxonomy for the data layer.

Internal helpers raise these; public operations catch them at their boundary,
log the message and hand the caller a plain success flag.
"""


class DataLayerError(Exception):
    """Base class for every expected data-layer failure."""


class NotFoundError(DataLayerError):
    """A database, collection, field or record does not exist."""


class AlreadyExistsError(DataLayerError):
    """A name is already taken in its scope."""


class InvalidArgumentError(DataLayerError):
    """Reserved name, unsupported type or unusable addressing mode."""


class InvalidValueError(InvalidArgumentError):
    """A value does not satisfy its declared field type."""


class PartialFailureError(DataLayerError):
    """Some items of a cascade or bulk rewrite failed."""


class StorageUnavailableError(DataLayerError):
    """The underlying store could not be opened or written."""


class CodecError(DataLayerError):
    """A record payload could not be decoded or encoded."""
