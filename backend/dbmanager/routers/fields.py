"""
Fields router.
"""
from fastapi import APIRouter, Depends, HTTPException, status

from dbmanager.core.field_types import FieldType
from dbmanager.dependencies import get_manager
from dbmanager.schemas.database import MessageResponse
from dbmanager.schemas.field import FieldCreate, FieldInfo, FieldUpdate
from dbmanager.services.database_manager import DatabaseManager

router = APIRouter(
    prefix="/databases/{database_name}/collections/{collection_name}/fields",
    tags=["Fields"],
)


@router.get(
    "",
    response_model=list[FieldInfo],
    summary="List fields",
)
async def list_fields(
    database_name: str,
    collection_name: str,
    manager: DatabaseManager = Depends(get_manager),
):
    """
    List declared fields sorted by name.

    Keys found in records without a declared field are declared as STRING
    fields while listing.
    """
    fields = await manager.list_fields(database_name, collection_name)
    return [
        FieldInfo(
            name=name,
            type=field_type,
            display_name=FieldType(field_type).display_name,
        )
        for name, field_type in fields
    ]


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create field",
)
async def create_field(
    database_name: str,
    collection_name: str,
    body: FieldCreate,
    manager: DatabaseManager = Depends(get_manager),
):
    """
    Declare a field.

    - **name**: Field name; "id" is reserved
    - **type**: STRING, INTEGER, DOUBLE, BOOLEAN or JSON
    """
    if not await manager.create_field(database_name, collection_name, body.name, body.type):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Could not create field",
        )
    return MessageResponse(message=f"Field {body.name} created")


@router.patch(
    "/{field_name}",
    response_model=MessageResponse,
    summary="Update field",
)
async def update_field(
    database_name: str,
    collection_name: str,
    field_name: str,
    body: FieldUpdate,
    manager: DatabaseManager = Depends(get_manager),
):
    """Rename and/or retype a field; a rename is applied to every record."""
    updated = await manager.update_field(
        database_name, collection_name, field_name, body.new_name, body.new_type
    )
    if not updated:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Could not update field",
        )
    return MessageResponse(message=f"Field {field_name} updated")


@router.delete(
    "/{field_name}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete field",
)
async def delete_field(
    database_name: str,
    collection_name: str,
    field_name: str,
    manager: DatabaseManager = Depends(get_manager),
):
    """Delete a field and remove its value from every record."""
    if not await manager.delete_field(database_name, collection_name, field_name):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Could not delete field",
        )
