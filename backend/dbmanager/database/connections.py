"""
Database connection management.

The metadata store opens its own short-lived clients through
create_mongo_client(). The ConnectionManager tracks the database a caller has
selected, holding its handle inside an explicit ConnectionSession.
"""
import asyncio
import logging
from enum import Enum
from typing import Callable, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from dbmanager.config import get_settings

logger = logging.getLogger(__name__)


def create_mongo_client() -> AsyncIOMotorClient:
    """Create a new MongoDB client from settings."""
    settings = get_settings()
    return AsyncIOMotorClient(settings.mongo_uri)


class ConnectionState(str, Enum):
    """Lifecycle of a session's database handle."""
    CLOSED = "closed"
    OPEN = "open"


class ConnectionSession:
    """
    The database a caller currently has selected.

    Owned by the caller (one per UI flow or per application) and passed into
    every operation that reads or changes the selection.
    """

    def __init__(self):
        self.database_name: Optional[str] = None
        self.handle: Optional[AsyncIOMotorDatabase] = None
        self._client: Optional[AsyncIOMotorClient] = None

    @property
    def state(self) -> ConnectionState:
        return ConnectionState.OPEN if self.handle is not None else ConnectionState.CLOSED

    @property
    def is_open(self) -> bool:
        return self.state == ConnectionState.OPEN

    def refers_to(self, name: str) -> bool:
        return self.database_name == name

    def __repr__(self) -> str:
        return f"ConnectionSession(state={self.state.value}, database={self.database_name!r})"


class ConnectionManager:
    """Opens, closes and resets the per-database handle held by a session."""

    def __init__(
        self,
        client_factory: Optional[Callable[[], AsyncIOMotorClient]] = None,
        database_prefix: Optional[str] = None,
        reset_delay_seconds: Optional[float] = None,
    ):
        settings = get_settings()
        self._client_factory = client_factory or create_mongo_client
        self.database_prefix = (
            database_prefix if database_prefix is not None else settings.database_prefix
        )
        self.reset_delay_seconds = (
            reset_delay_seconds
            if reset_delay_seconds is not None
            else settings.reset_delay_seconds
        )

    def physical_name(self, name: str) -> str:
        """MongoDB database name backing a logical database."""
        return f"{self.database_prefix}{name}"

    async def open_database(self, session: ConnectionSession, name: str) -> bool:
        """
        Select a database, closing whatever the session had open before.

        Returns:
            True if the handle was opened and answered a probe
        """
        self.close_database(session)
        client = None
        try:
            client = self._client_factory()
            handle = client[self.physical_name(name)]
            # Probe so an unreachable server is reported here, not on first use
            await handle.list_collection_names()
        except Exception as e:
            logger.error(f"Error opening database {name}: {e}")
            if client is not None:
                client.close()
            return False

        session._client = client
        session.handle = handle
        session.database_name = name
        logger.info(f"Database opened: {name}")
        return True

    def close_database(self, session: ConnectionSession) -> None:
        """Release the session's handle. Never raises."""
        client = session._client
        session._client = None
        session.handle = None
        session.database_name = None
        if client is None:
            return
        try:
            client.close()
            logger.info("Database closed")
        except Exception as e:
            logger.error(f"Error closing database: {e}")

    async def reset_connection(self, session: ConnectionSession) -> bool:
        """
        Close the handle, wait for locks to settle and reopen the same database.

        Returns:
            True if nothing was open, or the previous database was reopened.
            On False the session keeps the database name so a retry reopens it.
        """
        name = session.database_name
        try:
            self.close_database(session)
            await asyncio.sleep(self.reset_delay_seconds)
            result = await self.open_database(session, name) if name is not None else True
        except Exception as e:
            logger.error(f"Error resetting connection: {e}")
            result = False
        if not result:
            # Selection survives a failed reopen; the handle stays closed
            session.database_name = name
            return False
        logger.info("Connection reset")
        return True

    async def drop_database_storage(self, name: str) -> None:
        """Drop the MongoDB database backing a logical database."""
        client = self._client_factory()
        try:
            await client.drop_database(self.physical_name(name))
        finally:
            client.close()
