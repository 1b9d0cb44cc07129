"""Meta value handlers and their registry."""

from __future__ import annotations

__all__ = [
    "ArrayHandler",
    "BooleanHandler",
    "DateTimeHandler",
    "DoubleHandler",
    "Handler",
    "HandlerRegistry",
    "IntegerHandler",
    "ModelCollection",
    "ModelCollectionHandler",
    "ModelHandler",
    "NullHandler",
    "ObjectHandler",
    "StringHandler",
    "default_registry",
]

from .base import Handler
from .model import ModelCollection, ModelCollectionHandler, ModelHandler
from .registry import HandlerRegistry, default_registry
from .scalar import (
    BooleanHandler,
    DoubleHandler,
    IntegerHandler,
    NullHandler,
    StringHandler,
)
from .structured import ArrayHandler, ObjectHandler
from .temporal import DateTimeHandler
