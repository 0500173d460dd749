"""
Collection metadata model.
"""
from pydantic import Field

from dbmanager.models.base import MetadataDocument


class CollectionMetadata(MetadataDocument):
    """
    Collection document in the metadata store collections collection.
    """
    database_id: str = Field(..., description="Owning database ID")
    name: str = Field(..., description="Collection name, unique per database")
