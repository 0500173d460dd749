"""
Request and response schemas for API endpoints.
"""
from dbmanager.schemas.database import (
    DatabaseCreate,
    DatabaseRename,
    ConnectionOpen,
    ConnectionStatus,
    MessageResponse,
)
from dbmanager.schemas.collection import CollectionCreate, CollectionRename
from dbmanager.schemas.field import FieldCreate, FieldUpdate, FieldInfo
from dbmanager.schemas.record import RecordInsert, RecordQuery, RecordUpdate, RecordDelete

__all__ = [
    # Database
    "DatabaseCreate",
    "DatabaseRename",
    "ConnectionOpen",
    "ConnectionStatus",
    "MessageResponse",
    # Collection
    "CollectionCreate",
    "CollectionRename",
    # Field
    "FieldCreate",
    "FieldUpdate",
    "FieldInfo",
    # Record
    "RecordInsert",
    "RecordQuery",
    "RecordUpdate",
    "RecordDelete",
]
