"""Ordered registry of meta value handlers."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from metable_db.datatype.base import Handler
from metable_db.datatype.model import ModelCollectionHandler, ModelHandler
from metable_db.datatype.scalar import (
    BooleanHandler,
    DoubleHandler,
    IntegerHandler,
    NullHandler,
    StringHandler,
)
from metable_db.datatype.structured import ArrayHandler, ObjectHandler
from metable_db.datatype.temporal import DateTimeHandler
from metable_db.errors import UnknownTypeTagError, UnsupportedTypeError

__all__ = ["HandlerRegistry", "default_registry"]


class HandlerRegistry:
    """
    Ordered collection of handlers.

    Value resolution scans handlers in registration order and returns the
    first one accepting the value. Tag resolution is a direct lookup.

    Parameters
    ----------
    handlers : Iterable[Handler], optional
        Handlers to register, in resolution order

    Examples
    --------
    >>> registry = default_registry()
    >>> registry.get_handler_for_value(3).get_data_type()
    'integer'
    """

    def __init__(self, handlers: Iterable[Handler] = ()) -> None:
        self._handlers: dict[str, Handler] = {}
        for handler in handlers:
            self.add_handler(handler)

    def add_handler(self, handler: Handler) -> None:
        """Register ``handler``, replacing any handler with the same tag."""
        self._handlers[handler.get_data_type()] = handler

    def has_handler_for_type(self, tag: str) -> bool:
        return tag in self._handlers

    def get_handler_for_type(self, tag: str) -> Handler:
        """
        Return the handler registered under ``tag``.

        Raises
        ------
        UnknownTypeTagError
            If no handler uses ``tag``
        """
        try:
            return self._handlers[tag]
        except KeyError:
            raise UnknownTypeTagError(tag) from None

    def get_handler_for_value(self, value: Any) -> Handler:
        """
        Return the first handler accepting ``value``.

        Raises
        ------
        UnsupportedTypeError
            If no handler accepts ``value``
        """
        for handler in self._handlers.values():
            if handler.can_handle_value(value):
                return handler
        raise UnsupportedTypeError(value)

    def __iter__(self) -> Iterator[Handler]:
        return iter(self._handlers.values())

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, tag: object) -> bool:
        return tag in self._handlers


def default_registry() -> HandlerRegistry:
    """Build a registry with the standard handlers in resolution order."""
    return HandlerRegistry(
        [
            BooleanHandler(),
            NullHandler(),
            IntegerHandler(),
            DoubleHandler(),
            StringHandler(),
            DateTimeHandler(),
            ModelCollectionHandler(),
            ModelHandler(),
            ArrayHandler(),
            ObjectHandler(),
        ]
    )
