"""
Dynamic Database Manager Backend - FastAPI Application

Schema-flexible databases, collections, fields and records on top of MongoDB.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dbmanager.config import get_settings
from dbmanager.core.logging_setup import setup_logging
from dbmanager.database.connections import ConnectionSession
from dbmanager.routers import health, databases, collections, fields, records
from dbmanager.services.database_manager import DatabaseManager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
    - Configure logging
    - Create the DatabaseManager and the application session

    Shutdown:
    - Close the selected database, if any
    """
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info("Starting up Dynamic Database Manager Backend...")

    app.state.manager = DatabaseManager()
    app.state.session = ConnectionSession()

    yield

    logger.info("Shutting down Dynamic Database Manager Backend...")
    app.state.manager.close_database(app.state.session)
    logger.info("Database connections closed")


app = FastAPI(
    title="Dynamic Database Manager API",
    description="""
## Dynamic Database Manager API

Manage schema-flexible data stored in MongoDB.

### Features
- **Databases**: Create, rename, delete and select databases
- **Collections**: Group records inside a database
- **Fields**: Declare typed fields (STRING, INTEGER, DOUBLE, BOOLEAN, JSON); undeclared keys found in records are declared automatically
- **Records**: Insert with type checking, query with equality filters, update and delete by position or filter

### Positional handles
Query results carry `__position`. Pass it back to update or delete that record.
It is only valid until the collection changes.
    """,
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",  # Development
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(databases.router)
app.include_router(collections.router)
app.include_router(fields.router)
app.include_router(records.router)


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Dynamic Database Manager API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
