"""
Dynamic data record model.
"""
from typing import Any

from pydantic import Field

from dbmanager.core.codec import decode_values
from dbmanager.models.base import MetadataDocument


class DataRecord(MetadataDocument):
    """
    Record document in the metadata store data_records collection.

    The record's values live in field_values as one encoded map rather than
    as typed columns.
    """
    collection_id: str = Field(..., description="Owning collection ID")
    field_values: str = Field(
        default="",
        description="JSON text of field name -> value"
    )

    @property
    def values(self) -> dict[str, Any]:
        """Decoded field map."""
        return decode_values(self.field_values)
