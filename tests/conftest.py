"""
Global test fixtures for the Dynamic Database Manager.

This module provides shared fixtures for all tests including:
- Mock MongoDB (mongomock-motor)
- Metadata store, connection manager and DatabaseManager wired to the mock
- Mock client factories for connection handling tests
- FastAPI app and async HTTP client
"""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))


# =============================================================================
# MongoDB Fixtures (mongomock)
# =============================================================================

@pytest_asyncio.fixture
async def mock_async_mongo_client():
    """
    Create an async mock MongoDB client using mongomock-motor.

    This provides an in-memory MongoDB that behaves like the real thing
    for testing purposes.
    """
    try:
        from mongomock_motor import AsyncMongoMockClient
        client = AsyncMongoMockClient()
        yield client
        client.close()
    except ImportError:
        pytest.skip("mongomock-motor not installed")


@pytest.fixture
def mock_client_factory():
    """
    Factory producing MagicMock clients whose database handles answer probes.

    The produced clients are recorded on `factory.clients` so tests can
    assert on close() calls.
    """
    def factory():
        client = MagicMock()
        handle = MagicMock()
        handle.list_collection_names = AsyncMock(return_value=[])
        client.__getitem__.return_value = handle
        client.drop_database = AsyncMock()
        factory.clients.append(client)
        return client

    factory.clients = []
    return factory


# =============================================================================
# Data Layer Fixtures
# =============================================================================

@pytest.fixture
def metadata_store(mock_async_mongo_client):
    """MetadataStore whose short-lived handles all land on the mock client."""
    from dbmanager.database.metadata_store import MetadataStore

    return MetadataStore(
        client_factory=lambda: mock_async_mongo_client,
        db_name="test_metadata",
    )


@pytest.fixture
def connection_manager(mock_client_factory):
    """ConnectionManager with mocked clients and no reset pause."""
    from dbmanager.database.connections import ConnectionManager

    return ConnectionManager(
        client_factory=mock_client_factory,
        database_prefix="test_",
        reset_delay_seconds=0,
    )


@pytest.fixture
def manager(metadata_store, connection_manager):
    """DatabaseManager wired to the mock metadata store."""
    from dbmanager.services.database_manager import DatabaseManager

    return DatabaseManager(metadata_store, connection_manager)


@pytest.fixture
def session():
    """A fresh, closed ConnectionSession."""
    from dbmanager.database.connections import ConnectionSession

    return ConnectionSession()


@pytest.fixture
def metadata_db(mock_async_mongo_client):
    """Raw handle on the test metadata database for direct inspection."""
    return mock_async_mongo_client["test_metadata"]


# =============================================================================
# FastAPI Test Client Fixtures
# =============================================================================

@pytest.fixture
def app(manager, session):
    """
    FastAPI app with the test DatabaseManager and session on app.state.

    The lifespan is not run, so nothing touches a real server.
    """
    from dbmanager.main import app

    app.state.manager = manager
    app.state.session = session
    yield app
    del app.state.manager
    del app.state.session


@pytest.fixture
def client(app):
    """
    Create a synchronous test client.

    Use this for endpoints that do not touch the metadata store.
    """
    from fastapi.testclient import TestClient

    return TestClient(app)


@pytest_asyncio.fixture
async def async_client(app):
    """
    Create an async test client.

    Use this for testing async endpoints.
    """
    from httpx import AsyncClient, ASGITransport

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac
