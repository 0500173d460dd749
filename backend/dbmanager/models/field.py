"""
Field metadata model.
"""
from pydantic import Field

from dbmanager.core.field_types import FieldType
from dbmanager.models.base import MetadataDocument


class FieldMetadata(MetadataDocument):
    """
    Declared field document in the metadata store fields collection.
    """
    collection_id: str = Field(..., description="Owning collection ID")
    name: str = Field(..., description="Field name, unique per collection")
    type: FieldType = Field(
        default=FieldType.STRING,
        description="Declared value type"
    )

    class Config:
        populate_by_name = True
        use_enum_values = True

    def as_pair(self) -> tuple[str, str]:
        """(name, type) pair as handed to callers."""
        return self.name, FieldType(self.type).value
