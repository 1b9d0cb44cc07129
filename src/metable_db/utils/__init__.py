"""Utility functions for metable_db."""

from __future__ import annotations

__all__ = [
    "instance_pk",
    "is_entity",
    "morph_alias",
    "normalize_key",
    "primary_key_column",
    "resolve_morph_class",
    # Mapped types
    "Pk",
    "MetaKey",
    "MorphId",
    "MorphType",
    "RawValue",
    "TypeTag",
]

from .mapped_types import MetaKey, MorphId, MorphType, Pk, RawValue, TypeTag
from .morph import (
    instance_pk,
    is_entity,
    morph_alias,
    normalize_key,
    primary_key_column,
    resolve_morph_class,
)
