"""
Database metadata model.
"""
from pydantic import Field

from dbmanager.models.base import MetadataDocument


class DatabaseMetadata(MetadataDocument):
    """
    Logical database document in the metadata store databases collection.
    """
    name: str = Field(..., description="Unique user-facing database name")
