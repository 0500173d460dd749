"""
Pydantic models for metadata store documents.
"""
from dbmanager.models.database import DatabaseMetadata
from dbmanager.models.collection import CollectionMetadata
from dbmanager.models.field import FieldMetadata
from dbmanager.models.record import DataRecord

__all__ = [
    "DatabaseMetadata",
    "CollectionMetadata",
    "FieldMetadata",
    "DataRecord",
]
