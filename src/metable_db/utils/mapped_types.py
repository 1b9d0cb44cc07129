"""SQLAlchemy mapped type helpers for consistent column definitions."""

from __future__ import annotations

from typing import Annotated

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import mapped_column

__all__ = [
    "Pk",
    "MetaKey",
    "MorphId",
    "MorphType",
    "RawValue",
    "TypeTag",
]

# Primary Key Types
Pk = Annotated[
    int,
    mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Primary key",
    ),
]

# Polymorphic owner reference
MorphType = Annotated[
    str,
    mapped_column(
        String(128),
        index=True,
        comment="Morph alias of the owning class",
    ),
]

MorphId = Annotated[
    int,
    mapped_column(
        Integer,
        index=True,
        comment="Primary key of the owning record",
    ),
]

# String Field Types
MetaKey = Annotated[
    str,
    mapped_column(
        String(255),
        index=True,
        comment="Lower-cased meta key",
    ),
]

TypeTag = Annotated[
    str,
    mapped_column(
        String(32),
        comment="Data type handler tag",
    ),
]

RawValue = Annotated[
    str | None,
    mapped_column(
        Text,
        nullable=True,
        comment="Serialized value",
    ),
]
