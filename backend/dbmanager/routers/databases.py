"""
Databases router for database metadata and the selected-database session.
"""
from fastapi import APIRouter, Depends, HTTPException, status

from dbmanager.database.connections import ConnectionSession
from dbmanager.dependencies import get_manager, get_session
from dbmanager.schemas.database import (
    DatabaseCreate,
    DatabaseRename,
    ConnectionOpen,
    ConnectionStatus,
    MessageResponse,
)
from dbmanager.services.database_manager import DatabaseManager

router = APIRouter(tags=["Databases"])


def _status(session: ConnectionSession) -> ConnectionStatus:
    return ConnectionStatus(state=session.state, database_name=session.database_name)


# ==================== Databases ====================


@router.get(
    "/databases",
    response_model=list[str],
    summary="List databases",
)
async def list_databases(manager: DatabaseManager = Depends(get_manager)):
    """List database names in ascending order."""
    return await manager.list_databases()


@router.post(
    "/databases",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create database",
)
async def create_database(
    body: DatabaseCreate,
    manager: DatabaseManager = Depends(get_manager),
):
    """
    Create a new database.

    - **name**: Database name, unique across all databases
    """
    if not await manager.create_database(body.name):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Could not create database",
        )
    return MessageResponse(message=f"Database {body.name} created")


@router.patch(
    "/databases/{database_name}",
    response_model=MessageResponse,
    summary="Rename database",
)
async def rename_database(
    database_name: str,
    body: DatabaseRename,
    manager: DatabaseManager = Depends(get_manager),
    session: ConnectionSession = Depends(get_session),
):
    """Rename a database. The selected database follows the rename."""
    if not await manager.rename_database(database_name, body.new_name, session):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Could not rename database",
        )
    return MessageResponse(message=f"Database renamed to {body.new_name}")


@router.delete(
    "/databases/{database_name}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete database",
)
async def delete_database(
    database_name: str,
    manager: DatabaseManager = Depends(get_manager),
    session: ConnectionSession = Depends(get_session),
):
    """
    Delete a database with all its collections, fields and records.

    **Warning**: This action cannot be undone.
    """
    if not await manager.delete_database(database_name, session):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Could not delete database",
        )


# ==================== Connection ====================


@router.get(
    "/connection",
    response_model=ConnectionStatus,
    summary="Selected database",
)
async def get_connection(session: ConnectionSession = Depends(get_session)):
    """Current state of the application session."""
    return _status(session)


@router.post(
    "/connection/open",
    response_model=ConnectionStatus,
    summary="Open database",
)
async def open_database(
    body: ConnectionOpen,
    manager: DatabaseManager = Depends(get_manager),
    session: ConnectionSession = Depends(get_session),
):
    """Select a database, closing the previously selected one."""
    if not await manager.open_database(session, body.name):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Could not open database",
        )
    return _status(session)


@router.post(
    "/connection/close",
    response_model=ConnectionStatus,
    summary="Close database",
)
async def close_database(
    manager: DatabaseManager = Depends(get_manager),
    session: ConnectionSession = Depends(get_session),
):
    """Release the selected database."""
    manager.close_database(session)
    return _status(session)


@router.post(
    "/connection/reset",
    response_model=ConnectionStatus,
    summary="Reset connection",
)
async def reset_connection(
    manager: DatabaseManager = Depends(get_manager),
    session: ConnectionSession = Depends(get_session),
):
    """
    Close and reopen the selected database.

    Use when the store stops answering; a no-op when nothing is selected.
    """
    if not await manager.reset_connection(session):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not reset connection",
        )
    return _status(session)
