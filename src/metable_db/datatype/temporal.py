"""Handler for datetime values."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from metable_db.constants import DataType
from metable_db.datatype.base import Handler

__all__ = ["DATETIME_FORMAT", "DateTimeHandler"]

# ISO 8601 with microseconds and an explicit UTC offset, e.g.
# "2017-01-01 00:00:00.000000+0000". Lexical order matches time order for
# values sharing an offset.
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S.%f%z"


class DateTimeHandler(Handler):
    """
    Handle ``datetime.datetime`` values.

    Aware values keep their offset; the decoded value compares equal to the
    original (same instant, same utcoffset). Naive values are taken as UTC
    and come back aware.
    """

    data_type = DataType.DATETIME.value

    def can_handle_value(self, value: Any) -> bool:
        return isinstance(value, datetime)

    def serialize_value(self, value: datetime) -> str:
        if value.tzinfo is None or value.utcoffset() is None:
            value = value.replace(tzinfo=timezone.utc)
        # strftime does not pad years below 1000 but strptime wants four digits
        return f"{value.year:04d}" + value.strftime(DATETIME_FORMAT[2:])

    def unserialize_value(self, raw: str | None) -> datetime:
        return datetime.strptime(raw, DATETIME_FORMAT)
