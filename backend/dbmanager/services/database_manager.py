"""
DatabaseManager: the single entry point the presentation layer talks to.
"""
from typing import Any, Optional

from dbmanager.database.connections import ConnectionManager, ConnectionSession
from dbmanager.database.metadata_store import MetadataStore
from dbmanager.services.record_engine import RecordEngine
from dbmanager.services.schema_registry import SchemaRegistry


class DatabaseManager:
    """
    Facade over the connection manager, schema registry and record engine.

    Every operation returns a success flag or a (possibly empty) list; failure
    details are logged, not returned.
    """

    def __init__(
        self,
        store: Optional[MetadataStore] = None,
        connections: Optional[ConnectionManager] = None,
    ):
        self.store = store or MetadataStore()
        self.connections = connections or ConnectionManager()
        self.schema = SchemaRegistry(self.store, self.connections)
        self.records = RecordEngine(self.store)

    # ==================== Databases & connection ====================

    async def create_database(self, name: str) -> bool:
        return await self.schema.create_database(name)

    async def list_databases(self) -> list[str]:
        return await self.schema.list_databases()

    async def open_database(self, session: ConnectionSession, name: str) -> bool:
        return await self.connections.open_database(session, name)

    async def rename_database(
        self, old_name: str, new_name: str, session: Optional[ConnectionSession] = None
    ) -> bool:
        return await self.schema.rename_database(old_name, new_name, session)

    async def delete_database(
        self, name: str, session: Optional[ConnectionSession] = None
    ) -> bool:
        return await self.schema.delete_database(name, session)

    def close_database(self, session: ConnectionSession) -> None:
        self.connections.close_database(session)

    async def reset_connection(self, session: ConnectionSession) -> bool:
        return await self.connections.reset_connection(session)

    # ==================== Collections ====================

    async def create_collection(self, database_name: str, name: str) -> bool:
        return await self.schema.create_collection(database_name, name)

    async def list_collections(self, database_name: str) -> list[str]:
        return await self.schema.list_collections(database_name)

    async def rename_collection(
        self, database_name: str, old_name: str, new_name: str
    ) -> bool:
        return await self.schema.rename_collection(database_name, old_name, new_name)

    async def delete_collection(self, database_name: str, name: str) -> bool:
        return await self.schema.delete_collection(database_name, name)

    # ==================== Fields ====================

    async def create_field(
        self, database_name: str, collection_name: str, field_name: str, field_type: str
    ) -> bool:
        return await self.schema.create_field(
            database_name, collection_name, field_name, field_type
        )

    async def list_fields(
        self, database_name: str, collection_name: str
    ) -> list[tuple[str, str]]:
        return await self.schema.list_fields(database_name, collection_name)

    async def update_field(
        self,
        database_name: str,
        collection_name: str,
        old_name: str,
        new_name: str,
        new_type: str,
    ) -> bool:
        return await self.schema.update_field(
            database_name, collection_name, old_name, new_name, new_type
        )

    async def delete_field(
        self, database_name: str, collection_name: str, field_name: str
    ) -> bool:
        return await self.schema.delete_field(database_name, collection_name, field_name)

    # ==================== Records ====================

    async def insert_data(
        self, database_name: str, collection_name: str, values: dict[str, Any]
    ) -> bool:
        return await self.records.insert_data(database_name, collection_name, values)

    async def query_data(
        self,
        database_name: str,
        collection_name: str,
        filter: Optional[dict[str, Any]] = None,
    ) -> list[dict[str, Any]]:
        return await self.records.query_data(database_name, collection_name, filter)

    async def update_data(
        self,
        database_name: str,
        collection_name: str,
        position: Optional[int] = None,
        filter: Optional[dict[str, Any]] = None,
        values: Optional[dict[str, Any]] = None,
    ) -> bool:
        return await self.records.update_data(
            database_name, collection_name, position=position, filter=filter, values=values
        )

    async def delete_data(
        self,
        database_name: str,
        collection_name: str,
        position: Optional[int] = None,
        filter: Optional[dict[str, Any]] = None,
    ) -> bool:
        return await self.records.delete_data(
            database_name, collection_name, position=position, filter=filter
        )

    async def sync_collection_fields(self, database_name: str, collection_name: str) -> bool:
        return await self.records.sync_collection_fields(database_name, collection_name)
