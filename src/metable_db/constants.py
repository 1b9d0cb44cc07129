"""Constants and enumerations for metable_db."""

from __future__ import annotations

from enum import Enum

__all__ = [
    "DataType",
    "NUMERIC_OPERATORS",
    "SortDirection",
]


class DataType(str, Enum):
    """Type tags written to the ``meta.type`` column."""

    ARRAY = "array"
    BOOLEAN = "boolean"
    COLLECTION = "collection"
    DATETIME = "datetime"
    DOUBLE = "double"
    INTEGER = "integer"
    MODEL = "model"
    NULL = "null"
    OBJECT = "object"
    STRING = "string"


class SortDirection(str, Enum):
    """Sort direction accepted by the ordering scopes."""

    ASC = "asc"
    DESC = "desc"

    @classmethod
    def normalize(cls, direction: str) -> SortDirection:
        """Map ``asc`` (any case) to ASC and anything else to DESC."""
        if str(direction).strip().lower() == cls.ASC.value:
            return cls.ASC
        return cls.DESC


# Operators interpolated into a numeric comparison. Anything else is
# replaced with "=".
NUMERIC_OPERATORS = ("<", "<=", ">", ">=", "=", "<>", "!=")

