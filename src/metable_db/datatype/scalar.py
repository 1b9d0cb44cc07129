"""Handlers for scalar values: null, boolean, integer, double, string."""

from __future__ import annotations

from typing import Any

from metable_db.constants import DataType
from metable_db.datatype.base import Handler

__all__ = [
    "BooleanHandler",
    "DoubleHandler",
    "IntegerHandler",
    "NullHandler",
    "StringHandler",
]


class NullHandler(Handler):
    """Handle ``None``, stored as SQL NULL."""

    data_type = DataType.NULL.value

    def can_handle_value(self, value: Any) -> bool:
        return value is None

    def serialize_value(self, value: Any) -> str | None:
        return None

    def unserialize_value(self, raw: str | None) -> Any:
        return None


class BooleanHandler(Handler):
    """Handle strict booleans, stored as ``"1"``/``"0"``."""

    data_type = DataType.BOOLEAN.value

    def can_handle_value(self, value: Any) -> bool:
        return isinstance(value, bool)

    def serialize_value(self, value: Any) -> str:
        return "1" if value else "0"

    def unserialize_value(self, raw: str | None) -> bool:
        return raw == "1"


class IntegerHandler(Handler):
    """Handle integers (booleans excluded)."""

    data_type = DataType.INTEGER.value

    def can_handle_value(self, value: Any) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)

    def serialize_value(self, value: Any) -> str:
        return str(int(value))

    def unserialize_value(self, raw: str | None) -> int:
        return int(raw)


class DoubleHandler(Handler):
    """Handle native floats.

    ``repr`` yields the shortest string that reads back to the same float.
    """

    data_type = DataType.DOUBLE.value

    def can_handle_value(self, value: Any) -> bool:
        return isinstance(value, float)

    def serialize_value(self, value: Any) -> str:
        return repr(float(value))

    def unserialize_value(self, raw: str | None) -> float:
        return float(raw)


class StringHandler(Handler):
    """Handle strings, stored as-is."""

    data_type = DataType.STRING.value

    def can_handle_value(self, value: Any) -> bool:
        return isinstance(value, str)

    def serialize_value(self, value: Any) -> str:
        return value

    def unserialize_value(self, raw: str | None) -> str:
        return "" if raw is None else raw
