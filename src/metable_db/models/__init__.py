"""Data models for metable_db."""

from __future__ import annotations

__all__ = [
    # ORM models
    "Base",
    "Meta",
    "MetaBase",
    # Mixin
    "Metable",
    # Boundary schemas
    "MetaResponse",
]

from .metable import Metable
from .orm import Base, Meta, MetaBase
from .schemas import MetaResponse
