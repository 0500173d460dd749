"""
Metadata store access.

Every data-layer operation opens its own short-lived client on the metadata
database, does its reads and writes through a MetadataHandle, and closes the
client again.
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Callable, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from dbmanager.config import get_settings
from dbmanager.core.codec import encode_values
from dbmanager.core.errors import NotFoundError, StorageUnavailableError
from dbmanager.database.connections import create_mongo_client
from dbmanager.database.databases.metadata_db import Collections, create_metadata_indexes
from dbmanager.models import CollectionMetadata, DatabaseMetadata, DataRecord, FieldMetadata

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], AsyncIOMotorClient]


class MetadataHandle:
    """Lookups and writes against one open metadata database."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.databases = db[Collections.DATABASES]
        self.collections = db[Collections.COLLECTIONS]
        self.fields = db[Collections.FIELDS]
        self.records = db[Collections.DATA_RECORDS]

    # ==================== Databases ====================

    async def find_database(self, name: str) -> Optional[DatabaseMetadata]:
        doc = await self.databases.find_one({"name": name})
        return DatabaseMetadata.from_document(doc) if doc else None

    async def require_database(self, name: str) -> DatabaseMetadata:
        database = await self.find_database(name)
        if database is None:
            raise NotFoundError(f"Database not found: {name}")
        return database

    # ==================== Collections ====================

    async def find_collection(
        self, database_id: str, name: str
    ) -> Optional[CollectionMetadata]:
        doc = await self.collections.find_one({"database_id": database_id, "name": name})
        return CollectionMetadata.from_document(doc) if doc else None

    async def require_collection(
        self, database_name: str, collection_name: str
    ) -> CollectionMetadata:
        """
        Resolve a collection by database and collection name.

        Raises:
            NotFoundError: If either the database or the collection is missing
        """
        database = await self.require_database(database_name)
        collection = await self.find_collection(database.id, collection_name)
        if collection is None:
            raise NotFoundError(
                f"Collection not found: {collection_name} in {database_name}"
            )
        return collection

    async def collections_of(self, database_id: str) -> list[CollectionMetadata]:
        cursor = self.collections.find({"database_id": database_id}).sort("name", 1)
        docs = await cursor.to_list(length=None)
        return [CollectionMetadata.from_document(d) for d in docs]

    # ==================== Fields ====================

    async def find_field(self, collection_id: str, name: str) -> Optional[FieldMetadata]:
        doc = await self.fields.find_one({"collection_id": collection_id, "name": name})
        return FieldMetadata.from_document(doc) if doc else None

    async def fields_of(self, collection_id: str) -> list[FieldMetadata]:
        """Declared fields of a collection, sorted by name."""
        cursor = self.fields.find({"collection_id": collection_id}).sort("name", 1)
        docs = await cursor.to_list(length=None)
        return [FieldMetadata.from_document(d) for d in docs]

    # ==================== Records ====================

    async def records_of(self, collection_id: str) -> list[DataRecord]:
        """
        Records of a collection in listing order.

        Listing order is ascending _id, which is also the order positional
        handles refer to.
        """
        cursor = self.records.find({"collection_id": collection_id}).sort("_id", 1)
        docs = await cursor.to_list(length=None)
        return [DataRecord.from_document(d) for d in docs]

    async def write_record_values(self, record: DataRecord, values: dict[str, Any]) -> None:
        """Persist a record's new field map."""
        await self.records.update_one(
            {"_id": ObjectId(record.id)},
            {
                "$set": {
                    "field_values": encode_values(values),
                    "last_modified": datetime.now(timezone.utc),
                }
            },
        )

    async def delete_record(self, record: DataRecord) -> None:
        await self.records.delete_one({"_id": ObjectId(record.id)})


class MetadataStore:
    """Opens short-lived handles on the shared metadata database."""

    def __init__(
        self,
        client_factory: Optional[ClientFactory] = None,
        db_name: Optional[str] = None,
    ):
        settings = get_settings()
        self._client_factory = client_factory or create_mongo_client
        self.db_name = db_name or settings.metadata_db_name
        self._indexes_ready = False

    @asynccontextmanager
    async def session(self) -> AsyncIterator[MetadataHandle]:
        """
        Open a client, yield a handle on the metadata database, close the client.

        Raises:
            StorageUnavailableError: If the client cannot be created
        """
        try:
            client = self._client_factory()
        except Exception as e:
            raise StorageUnavailableError(f"Cannot open metadata store: {e}") from e

        try:
            db = client[self.db_name]
            if not self._indexes_ready:
                await create_metadata_indexes(db)
                self._indexes_ready = True
            yield MetadataHandle(db)
        finally:
            client.close()

    async def ping(self) -> None:
        """Round-trip to the server; raises if it is unreachable."""
        client = self._client_factory()
        try:
            await client.admin.command("ping")
        finally:
            client.close()
