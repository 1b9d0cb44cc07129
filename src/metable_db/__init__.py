"""Typed key/value meta attached to SQLAlchemy ORM records."""

from __future__ import annotations

__all__ = [
    "HandlerRegistry",
    "Meta",
    "MetaBase",
    "Metable",
    "MetableError",
    "ModelCollection",
    "default_registry",
]

from .datatype import HandlerRegistry, ModelCollection, default_registry
from .errors import MetableError
from .models import Meta, MetaBase, Metable
