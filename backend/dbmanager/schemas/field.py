"""
Field request/response schemas.
"""
from pydantic import BaseModel, Field


class FieldCreate(BaseModel):
    """Declare field request."""
    name: str = Field(..., min_length=1, max_length=100, description="Field name (not 'id')")
    type: str = Field(
        ...,
        description="STRING, INTEGER, DOUBLE, BOOLEAN or JSON (case-insensitive)"
    )


class FieldUpdate(BaseModel):
    """Rename and/or retype a field."""
    new_name: str = Field(..., min_length=1, max_length=100, description="New field name")
    new_type: str = Field(..., description="New field type")


class FieldInfo(BaseModel):
    """Declared field."""
    name: str
    type: str
    display_name: str = Field(..., description="Readable type label, e.g. Text or Decimal")
