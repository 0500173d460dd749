"""
Shared base for documents stored in the metadata store.
"""
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MetadataDocument(BaseModel):
    """
    Common identity and timestamp fields of every metadata document.
    """
    id: Optional[str] = Field(None, alias="_id", description="MongoDB ObjectId as string")
    created_at: datetime = Field(
        default_factory=utc_now,
        description="Creation timestamp"
    )
    last_modified: datetime = Field(
        default_factory=utc_now,
        description="Last modification timestamp"
    )

    class Config:
        populate_by_name = True

    @classmethod
    def from_document(cls, doc: dict[str, Any]):
        """Build the model from a raw MongoDB document."""
        data = dict(doc)
        if data.get("_id") is not None:
            data["_id"] = str(data["_id"])
        return cls.model_validate(data)

    def to_document(self) -> dict[str, Any]:
        """Document body for insertion (MongoDB assigns the _id)."""
        return self.model_dump(exclude={"id"})
