"""Handlers for structured values: arrays (list/dict) and generic objects."""

from __future__ import annotations

import json
from dataclasses import is_dataclass
from datetime import date, time
from types import SimpleNamespace
from typing import Any

from adaptix import Retort

from metable_db.constants import DataType
from metable_db.datatype.base import Handler
from metable_db.errors import UnsupportedTypeError
from metable_db.utils import is_entity

__all__ = ["OBJECT_MARKER", "ArrayHandler", "ObjectHandler"]

# Dumps dataclass instances to plain JSON-compatible dicts
_retort = Retort()

_NOT_OBJECTS = (
    str,
    bytes,
    bytearray,
    int,
    float,
    complex,
    list,
    tuple,
    dict,
    set,
    frozenset,
    date,
    time,
    type,
)


# Objects are written as {"__object__": {field: value, ...}} so that plain
# dicts among their fields decode as dicts.
OBJECT_MARKER = "__object__"


def _object_fields(obj: Any) -> dict[str, Any]:
    """``json.dumps`` fallback: field names and values of an object."""
    if is_dataclass(obj) and not isinstance(obj, type):
        return {OBJECT_MARKER: _retort.dump(obj, type(obj))}
    if hasattr(obj, "__dict__") and not is_entity(obj):
        return {OBJECT_MARKER: {k: v for k, v in vars(obj).items() if not k.startswith("_")}}
    raise TypeError(f"Object of type {type(obj).__name__} is not serializable")


def _decode_object(node: dict[str, Any]) -> Any:
    """``json.loads`` object hook: marked nodes become namespaces."""
    if len(node) == 1 and isinstance(node.get(OBJECT_MARKER), dict):
        return SimpleNamespace(**node[OBJECT_MARKER])
    return node


class ArrayHandler(Handler):
    """
    Handle lists and dicts as JSON.

    Key order and nesting are preserved. JSON object keys are strings, so
    dicts with non-string keys come back with string keys.
    """

    data_type = DataType.ARRAY.value

    def can_handle_value(self, value: Any) -> bool:
        return isinstance(value, (list, dict))

    def serialize_value(self, value: Any) -> str:
        try:
            return json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise UnsupportedTypeError(value, str(exc)) from exc

    def unserialize_value(self, raw: str | None) -> Any:
        return json.loads(raw)


class ObjectHandler(Handler):
    """
    Handle generic attribute-bearing objects.

    Only field names and values are kept, not the class: values decode as
    :class:`types.SimpleNamespace` (nested objects too), while dict fields
    stay dicts. Dataclasses are dumped through adaptix, which turns nested
    dataclass fields into plain dicts.
    """

    data_type = DataType.OBJECT.value

    def can_handle_value(self, value: Any) -> bool:
        if value is None or isinstance(value, _NOT_OBJECTS):
            return False
        if callable(value) or is_entity(value):
            return False
        if isinstance(value, SimpleNamespace) or is_dataclass(value):
            return True
        return hasattr(value, "__dict__")

    def serialize_value(self, value: Any) -> str:
        try:
            return json.dumps(value, default=_object_fields, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise UnsupportedTypeError(value, str(exc)) from exc

    def unserialize_value(self, raw: str | None) -> Any:
        return json.loads(raw, object_hook=_decode_object)
