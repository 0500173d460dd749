"""
Metadata database configuration.
Holds every database, collection, field and record document.

Structure:
- databases: Logical databases (unique name)
- collections: Collections owned by a database (unique per database)
- fields: Declared fields owned by a collection (unique per collection)
- data_records: Records owned by a collection, values stored as JSON text
"""
import logging

from motor.motor_asyncio import AsyncIOMotorDatabase

logger = logging.getLogger(__name__)


class Collections:
    """Collection names in the metadata database."""
    DATABASES = "databases"
    COLLECTIONS = "collections"
    FIELDS = "fields"
    DATA_RECORDS = "data_records"

    # Index definitions for each collection
    INDEXES = {
        "databases": [
            {"keys": [("name", 1)], "unique": True},
        ],
        "collections": [
            {"keys": [("database_id", 1), ("name", 1)], "unique": True},
        ],
        "fields": [
            {"keys": [("collection_id", 1), ("name", 1)], "unique": True},
        ],
        "data_records": [
            {"keys": [("collection_id", 1)]},
        ],
    }


async def create_metadata_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create indexes for metadata database collections."""
    for collection_name, indexes in Collections.INDEXES.items():
        collection = db[collection_name]
        for index_def in indexes:
            keys = index_def["keys"]
            kwargs = {k: v for k, v in index_def.items() if k != "keys"}
            try:
                await collection.create_index(keys, **kwargs)
            except Exception as e:
                # Index might already exist with different options
                logger.debug(f"Index exists or error on {collection_name}: {e}")
