"""
Collections router.
"""
from fastapi import APIRouter, Depends, HTTPException, status

from dbmanager.dependencies import get_manager
from dbmanager.schemas.collection import CollectionCreate, CollectionRename
from dbmanager.schemas.database import MessageResponse
from dbmanager.services.database_manager import DatabaseManager

router = APIRouter(prefix="/databases/{database_name}/collections", tags=["Collections"])


@router.get(
    "",
    response_model=list[str],
    summary="List collections",
)
async def list_collections(
    database_name: str,
    manager: DatabaseManager = Depends(get_manager),
):
    """List collection names of a database; empty if the database is missing."""
    return await manager.list_collections(database_name)


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create collection",
)
async def create_collection(
    database_name: str,
    body: CollectionCreate,
    manager: DatabaseManager = Depends(get_manager),
):
    """Create a collection in a database."""
    if not await manager.create_collection(database_name, body.name):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Could not create collection",
        )
    return MessageResponse(message=f"Collection {body.name} created")


@router.patch(
    "/{collection_name}",
    response_model=MessageResponse,
    summary="Rename collection",
)
async def rename_collection(
    database_name: str,
    collection_name: str,
    body: CollectionRename,
    manager: DatabaseManager = Depends(get_manager),
):
    if not await manager.rename_collection(database_name, collection_name, body.new_name):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Could not rename collection",
        )
    return MessageResponse(message=f"Collection renamed to {body.new_name}")


@router.delete(
    "/{collection_name}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete collection",
)
async def delete_collection(
    database_name: str,
    collection_name: str,
    manager: DatabaseManager = Depends(get_manager),
):
    """
    Delete a collection with its fields and records.

    **Warning**: This action cannot be undone.
    """
    if not await manager.delete_collection(database_name, collection_name):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Could not delete collection",
        )
