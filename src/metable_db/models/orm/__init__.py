"""SQLAlchemy 2.0 ORM models for metable_db.

- base.py - Declarative base
- meta.py - Meta record models (MetaBase, Meta)
"""

from __future__ import annotations

from metable_db.models.orm.base import Base
from metable_db.models.orm.meta import Meta, MetaBase

__all__ = [
    "Base",
    "Meta",
    "MetaBase",
]
