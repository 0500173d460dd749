"""
Database and connection request/response schemas.
"""
from typing import Optional

from pydantic import BaseModel, Field

from dbmanager.database.connections import ConnectionState


class DatabaseCreate(BaseModel):
    """Create database request."""
    name: str = Field(..., min_length=1, max_length=100, description="Database name")


class DatabaseRename(BaseModel):
    """Rename database request."""
    new_name: str = Field(..., min_length=1, max_length=100, description="New database name")


class ConnectionOpen(BaseModel):
    """Select a database for the application session."""
    name: str = Field(..., min_length=1, description="Database to open")


class ConnectionStatus(BaseModel):
    """State of the application session."""
    state: ConnectionState = Field(..., description="open or closed")
    database_name: Optional[str] = Field(None, description="Selected database, if any")


class MessageResponse(BaseModel):
    """Plain acknowledgement."""
    message: str
