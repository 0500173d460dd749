"""
Schema registry for databases, collections and fields.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId

from dbmanager.core.codec import is_internal_key, is_reserved_key
from dbmanager.core.errors import (
    AlreadyExistsError,
    CodecError,
    InvalidArgumentError,
    NotFoundError,
)
from dbmanager.core.field_types import FieldType
from dbmanager.database.connections import ConnectionManager, ConnectionSession
from dbmanager.database.metadata_store import MetadataHandle, MetadataStore
from dbmanager.models import CollectionMetadata, DatabaseMetadata, FieldMetadata
from dbmanager.services.boundary import boundary

logger = logging.getLogger(__name__)


def _require_name(name: str, kind: str) -> None:
    if not isinstance(name, str) or not name.strip():
        raise InvalidArgumentError(f"{kind} name must not be blank")


def _require_field_name(name: str) -> None:
    _require_name(name, "Field")
    if is_reserved_key(name):
        raise InvalidArgumentError("Fields named 'id' are not allowed")
    if is_internal_key(name):
        raise InvalidArgumentError(f"Field names starting with '__' are reserved: {name}")


class SchemaRegistry:
    """Service for database, collection and field metadata."""

    def __init__(self, store: MetadataStore, connections: ConnectionManager):
        """Initialize with the metadata store and the connection manager."""
        self.store = store
        self.connections = connections

    # ==================== Databases ====================

    @boundary("create database")
    async def create_database(self, name: str) -> bool:
        """Register a new database. Names are compared exactly."""
        _require_name(name, "Database")
        async with self.store.session() as meta:
            if await meta.find_database(name) is not None:
                raise AlreadyExistsError(f"Database already exists: {name}")
            await meta.databases.insert_one(DatabaseMetadata(name=name).to_document())
        logger.info(f"Database created: {name}")
        return True

    @boundary("list databases", default=list)
    async def list_databases(self) -> list[str]:
        """Database names, ascending."""
        async with self.store.session() as meta:
            cursor = meta.databases.find({}, {"name": 1}).sort("name", 1)
            docs = await cursor.to_list(length=None)
        logger.debug(f"Databases found: {len(docs)}")
        return [d["name"] for d in docs]

    @boundary("rename database")
    async def rename_database(
        self, old_name: str, new_name: str, session: Optional[ConnectionSession] = None
    ) -> bool:
        """
        Rename a database.

        If the session has the renamed database selected, it follows the new name.
        """
        _require_name(new_name, "Database")
        async with self.store.session() as meta:
            if await meta.find_database(new_name) is not None:
                raise AlreadyExistsError(f"Cannot rename, name already exists: {new_name}")
            database = await meta.require_database(old_name)
            await meta.databases.update_one(
                {"_id": ObjectId(database.id)},
                {"$set": {"name": new_name, "last_modified": datetime.now(timezone.utc)}},
            )

        if session is not None and session.refers_to(old_name):
            session.database_name = new_name
        logger.info(f"Database renamed: {old_name} -> {new_name}")
        return True

    @boundary("delete database")
    async def delete_database(
        self, name: str, session: Optional[ConnectionSession] = None
    ) -> bool:
        """
        Delete a database with all its collections, fields and records.

        The cascade is best-effort: a dependent that fails to delete is logged
        and skipped. The backing storage is dropped afterwards, also best-effort.
        """
        async with self.store.session() as meta:
            database = await meta.require_database(name)
            if session is not None and session.refers_to(name):
                self.connections.close_database(session)
            collections = await meta.collections_of(database.id)
            logger.info(f"Deleting {len(collections)} collections of database {name}")
            for collection in collections:
                await self._cascade_collection(meta, collection)
            await meta.databases.delete_one({"_id": ObjectId(database.id)})
        logger.info(f"Database deleted from metadata: {name}")

        try:
            await self.connections.drop_database_storage(name)
        except Exception as e:
            logger.error(f"Error dropping storage of database {name}: {e}")
        return True

    # ==================== Collections ====================

    @boundary("create collection")
    async def create_collection(self, database_name: str, name: str) -> bool:
        _require_name(name, "Collection")
        async with self.store.session() as meta:
            database = await meta.require_database(database_name)
            if await meta.find_collection(database.id, name) is not None:
                raise AlreadyExistsError(
                    f"Collection already exists: {name} in {database_name}"
                )
            collection = CollectionMetadata(database_id=database.id, name=name)
            await meta.collections.insert_one(collection.to_document())
        logger.info(f"Collection created: {name} in {database_name}")
        return True

    @boundary("list collections", default=list)
    async def list_collections(self, database_name: str) -> list[str]:
        """Collection names of a database, ascending; empty if it is missing."""
        async with self.store.session() as meta:
            database = await meta.require_database(database_name)
            collections = await meta.collections_of(database.id)
        return [c.name for c in collections]

    @boundary("rename collection")
    async def rename_collection(
        self, database_name: str, old_name: str, new_name: str
    ) -> bool:
        _require_name(new_name, "Collection")
        async with self.store.session() as meta:
            database = await meta.require_database(database_name)
            if await meta.find_collection(database.id, new_name) is not None:
                raise AlreadyExistsError(f"Cannot rename, name already exists: {new_name}")
            collection = await meta.find_collection(database.id, old_name)
            if collection is None:
                raise NotFoundError(f"Collection not found: {old_name} in {database_name}")
            await meta.collections.update_one(
                {"_id": ObjectId(collection.id)},
                {"$set": {"name": new_name, "last_modified": datetime.now(timezone.utc)}},
            )
        logger.info(f"Collection renamed: {old_name} -> {new_name} in {database_name}")
        return True

    @boundary("delete collection")
    async def delete_collection(self, database_name: str, name: str) -> bool:
        """Delete a collection with its records and fields, best-effort."""
        async with self.store.session() as meta:
            collection = await meta.require_collection(database_name, name)
            await self._cascade_collection(meta, collection)
        return True

    async def _cascade_collection(
        self, meta: MetadataHandle, collection: CollectionMetadata
    ) -> None:
        """
        Delete a collection's records, then its fields, then the collection.

        Failures on individual records or fields are logged and skipped; a
        failure deleting the collection row itself propagates.
        """
        records = await meta.records_of(collection.id)
        logger.info(f"Deleting {len(records)} records of collection {collection.name}")
        for record in records:
            try:
                await meta.delete_record(record)
            except Exception as e:
                logger.error(f"Error deleting record {record.id}: {e}")

        fields = await meta.fields_of(collection.id)
        logger.info(f"Deleting {len(fields)} fields of collection {collection.name}")
        for field in fields:
            try:
                await meta.fields.delete_one({"_id": ObjectId(field.id)})
            except Exception as e:
                logger.error(f"Error deleting field {field.name}: {e}")

        await meta.collections.delete_one({"_id": ObjectId(collection.id)})
        logger.info(f"Collection deleted: {collection.name}")

    # ==================== Fields ====================

    @boundary("create field")
    async def create_field(
        self, database_name: str, collection_name: str, field_name: str, field_type: str
    ) -> bool:
        """
        Declare a field. The name "id" is reserved in any letter case, and
        names starting with "__" are kept for bookkeeping keys.
        """
        _require_field_name(field_name)

        async with self.store.session() as meta:
            collection = await meta.require_collection(database_name, collection_name)
            if await meta.find_field(collection.id, field_name) is not None:
                raise AlreadyExistsError(
                    f"Field already exists: {field_name} in {collection_name}"
                )
            resolved = FieldType.parse(field_type)
            field = FieldMetadata(collection_id=collection.id, name=field_name, type=resolved)
            await meta.fields.insert_one(field.to_document())
        logger.info(f"Field created: {field_name} ({resolved.value}) in {collection_name}")
        return True

    @boundary("list fields", default=list)
    async def list_fields(
        self, database_name: str, collection_name: str
    ) -> list[tuple[str, str]]:
        """
        Declared fields as (name, type) pairs, sorted by name.

        Keys found in stored records that have no declared field are declared
        on the spot as STRING fields and appended to the result.
        """
        async with self.store.session() as meta:
            collection = await meta.require_collection(database_name, collection_name)
            declared = await meta.fields_of(collection.id)
            fields = [f.as_pair() for f in declared]
            known = {f.name for f in declared}

            undeclared: set[str] = set()
            for record in await meta.records_of(collection.id):
                try:
                    values = record.values
                except CodecError as e:
                    logger.error(f"Error reading record {record.id} for undeclared fields: {e}")
                    continue
                undeclared.update(
                    key for key in values
                    if key not in known and not is_reserved_key(key) and not is_internal_key(key)
                )

            for name in sorted(undeclared):
                field = FieldMetadata(
                    collection_id=collection.id, name=name, type=FieldType.STRING
                )
                await meta.fields.insert_one(field.to_document())
                logger.info(f"Field created automatically while listing: {name}")
                fields.append(field.as_pair())

        logger.debug(f"Fields found: {len(fields)} in {collection_name}")
        return fields

    @boundary("update field")
    async def update_field(
        self,
        database_name: str,
        collection_name: str,
        old_name: str,
        new_name: str,
        new_type: str,
    ) -> bool:
        """
        Rename and/or retype a field.

        A rename also moves the value under the new key in every record of the
        collection. Stored values are not converted to the new type.
        """
        _require_field_name(new_name)
        resolved = FieldType.parse(new_type)

        async with self.store.session() as meta:
            collection = await meta.require_collection(database_name, collection_name)
            renamed = old_name != new_name
            if renamed and await meta.find_field(collection.id, new_name) is not None:
                raise AlreadyExistsError(f"Cannot rename, name already exists: {new_name}")

            field = await meta.find_field(collection.id, old_name)
            if field is None:
                raise NotFoundError(f"Field not found: {old_name} in {collection_name}")

            await meta.fields.update_one(
                {"_id": ObjectId(field.id)},
                {
                    "$set": {
                        "name": new_name,
                        "type": resolved.value,
                        "last_modified": datetime.now(timezone.utc),
                    }
                },
            )
            logger.info(f"Field updated: {old_name} -> {new_name} ({resolved.value})")

            if renamed:
                await self._rename_key_in_records(meta, collection, old_name, new_name)
        return True

    async def _rename_key_in_records(
        self,
        meta: MetadataHandle,
        collection: CollectionMetadata,
        old_name: str,
        new_name: str,
    ) -> None:
        records = await meta.records_of(collection.id)
        logger.info(f"Renaming field in {len(records)} records")
        for record in records:
            try:
                values = record.values
                if old_name in values:
                    values[new_name] = values.pop(old_name)
                    await meta.write_record_values(record, values)
            except Exception as e:
                logger.error(f"Error renaming field in record {record.id}: {e}")

    @boundary("delete field")
    async def delete_field(
        self, database_name: str, collection_name: str, field_name: str
    ) -> bool:
        """Remove a field and strip its key from every record, keeping the records."""
        async with self.store.session() as meta:
            collection = await meta.require_collection(database_name, collection_name)
            field = await meta.find_field(collection.id, field_name)
            if field is None:
                raise NotFoundError(f"Field not found: {field_name} in {collection_name}")

            await meta.fields.delete_one({"_id": ObjectId(field.id)})
            logger.info(f"Field deleted from metadata: {field_name}")

            records = await meta.records_of(collection.id)
            logger.info(f"Removing field from {len(records)} records")
            for record in records:
                try:
                    values = record.values
                    if field_name in values:
                        del values[field_name]
                        await meta.write_record_values(record, values)
                except Exception as e:
                    logger.error(f"Error removing field from record {record.id}: {e}")
        return True
