"""
Records router for inserting, querying, updating and deleting records.
"""
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from dbmanager.dependencies import get_manager
from dbmanager.schemas.database import MessageResponse
from dbmanager.schemas.record import RecordDelete, RecordInsert, RecordQuery, RecordUpdate
from dbmanager.services.database_manager import DatabaseManager

router = APIRouter(
    prefix="/databases/{database_name}/collections/{collection_name}/records",
    tags=["Records"],
)


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Insert record",
)
async def insert_record(
    database_name: str,
    collection_name: str,
    body: RecordInsert,
    manager: DatabaseManager = Depends(get_manager),
):
    """
    Insert a record.

    Every key must be a declared field and every value must fit its type;
    strings are converted to INTEGER/DOUBLE/BOOLEAN fields where possible.
    """
    if not await manager.insert_data(database_name, collection_name, body.values):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Could not insert record",
        )
    return MessageResponse(message="Record inserted")


@router.post(
    "/query",
    response_model=list[dict[str, Any]],
    summary="Query records",
)
async def query_records(
    database_name: str,
    collection_name: str,
    body: RecordQuery,
    manager: DatabaseManager = Depends(get_manager),
):
    """
    List records with every declared field.

    Each row carries `__position`, the handle to pass to update/delete.
    """
    return await manager.query_data(database_name, collection_name, body.filter)


@router.patch(
    "",
    response_model=MessageResponse,
    summary="Update records",
)
async def update_records(
    database_name: str,
    collection_name: str,
    body: RecordUpdate,
    manager: DatabaseManager = Depends(get_manager),
):
    """Merge values into the record at `position`, or into all records matching `filter`."""
    updated = await manager.update_data(
        database_name,
        collection_name,
        position=body.position,
        filter=body.filter,
        values=body.values,
    )
    if not updated:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Could not update record",
        )
    return MessageResponse(message="Records updated")


@router.post(
    "/delete",
    response_model=MessageResponse,
    summary="Delete records",
)
async def delete_records(
    database_name: str,
    collection_name: str,
    body: RecordDelete,
    manager: DatabaseManager = Depends(get_manager),
):
    """Delete the record at `position`, or all records matching `filter`."""
    deleted = await manager.delete_data(
        database_name,
        collection_name,
        position=body.position,
        filter=body.filter,
    )
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Could not delete record",
        )
    return MessageResponse(message="Records deleted")


@router.post(
    "/sync",
    response_model=MessageResponse,
    summary="Sync records with fields",
)
async def sync_records(
    database_name: str,
    collection_name: str,
    manager: DatabaseManager = Depends(get_manager),
):
    """Add missing declared fields as null and drop undeclared keys in every record."""
    if not await manager.sync_collection_fields(database_name, collection_name):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Could not sync records",
        )
    return MessageResponse(message="Records synced")
