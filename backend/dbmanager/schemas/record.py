"""
Record request schemas.

Rows returned by queries are plain maps of field name -> value plus the
"__position" handle, so there is no row response model.
"""
from typing import Any, Optional

from pydantic import BaseModel, Field


class RecordInsert(BaseModel):
    """Insert record request."""
    values: dict[str, Any] = Field(default_factory=dict, description="Field name -> value")


class RecordQuery(BaseModel):
    """Query records request."""
    filter: Optional[dict[str, Any]] = Field(
        None,
        description="Equality filter on string forms of values"
    )


class RecordUpdate(BaseModel):
    """Update records by position or filter."""
    position: Optional[int] = Field(None, ge=0, description="Positional handle from a query")
    filter: Optional[dict[str, Any]] = Field(None, description="Equality filter")
    values: dict[str, Any] = Field(default_factory=dict, description="Values to merge")


class RecordDelete(BaseModel):
    """Delete records by position or filter."""
    position: Optional[int] = Field(None, ge=0, description="Positional handle from a query")
    filter: Optional[dict[str, Any]] = Field(None, description="Equality filter")
