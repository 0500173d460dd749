"""
Collection request schemas.
"""
from pydantic import BaseModel, Field


class CollectionCreate(BaseModel):
    """Create collection request."""
    name: str = Field(..., min_length=1, max_length=100, description="Collection name")


class CollectionRename(BaseModel):
    """Rename collection request."""
    new_name: str = Field(..., min_length=1, max_length=100, description="New collection name")
