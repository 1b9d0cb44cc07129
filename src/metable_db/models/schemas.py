"""Pydantic schemas for CLI/API boundaries.

These schemas are used ONLY at external boundaries (JSON export from the
CLI). Internal operations use ORM objects directly.

Examples
--------
>>> from metable_db.models.schemas import MetaResponse
>>> response = MetaResponse.model_validate(meta)
>>> print(response.model_dump_json(indent=2))
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["MetaResponse"]


class MetaResponse(BaseModel):
    """Schema for exporting a Meta record."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    metable_type: str = Field(..., description="Morph alias of the owner class")
    metable_id: int = Field(..., description="Owner primary key")
    key: str = Field(..., description="Lower-cased meta key")
    type: str = Field(..., description="Data type handler tag")
    raw_value: str | None = Field(None, description="Serialized value")
