"""
Database module - MongoDB connections, metadata store and collection definitions.
"""
from dbmanager.database.connections import (
    create_mongo_client,
    ConnectionManager,
    ConnectionSession,
    ConnectionState,
)
from dbmanager.database.metadata_store import MetadataHandle, MetadataStore
from dbmanager.database.databases import metadata_db

__all__ = [
    "create_mongo_client",
    "ConnectionManager",
    "ConnectionSession",
    "ConnectionState",
    "MetadataHandle",
    "MetadataStore",
    "metadata_db",
]
