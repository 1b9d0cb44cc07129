"""Tests for meta value handlers.

Each handler declares a tag, accepts its own category of values only, and
reads back what it wrote.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from metable_db.datatype import (
    ArrayHandler,
    BooleanHandler,
    DateTimeHandler,
    DoubleHandler,
    IntegerHandler,
    NullHandler,
    ObjectHandler,
    StringHandler,
)
from metable_db.errors import UnsupportedTypeError
from sample_models import SampleMetable


@dataclass
class Point:
    x: int
    y: int


HANDLER_CASES = {
    "array": (
        ArrayHandler(),
        "array",
        {"foo": ["bar"], "0": "baz"},
        [SimpleNamespace(), "[]", 1],
    ),
    "boolean": (
        BooleanHandler(),
        "boolean",
        True,
        [1, 0, "", [], None],
    ),
    "datetime": (
        DateTimeHandler(),
        "datetime",
        datetime(2017, 1, 1, tzinfo=timezone.utc),
        [2017, "2017-01-01"],
    ),
    "double": (
        DoubleHandler(),
        "double",
        1.1,
        ["1.1", 1],
    ),
    "integer": (
        IntegerHandler(),
        "integer",
        3,
        [1.1, "1", True],
    ),
    "null": (
        NullHandler(),
        "null",
        None,
        [0, "", "null", [], False],
    ),
    "object": (
        ObjectHandler(),
        "object",
        SimpleNamespace(foo="bar", baz=3),
        [[], {}, "foo", 3, None],
    ),
    "string": (
        StringHandler(),
        "string",
        "foo",
        [1, 1.1],
    ),
}


@pytest.fixture(params=list(HANDLER_CASES), ids=list(HANDLER_CASES))
def handler_case(request):
    return HANDLER_CASES[request.param]


def test_it_specifies_a_datatype_identifier(handler_case):
    handler, data_type, _, _ = handler_case
    assert handler.get_data_type() == data_type


def test_it_can_verify_compatibility(handler_case):
    handler, _, value, incompatible = handler_case
    assert handler.can_handle_value(value)
    for other in incompatible:
        assert not handler.can_handle_value(other), other


def test_it_can_serialize_and_unserialize_values(handler_case):
    handler, _, value, _ = handler_case
    serialized = handler.serialize_value(value)
    assert handler.unserialize_value(serialized) == value


class TestScalarEncoding:
    """Test the stored text of scalar values."""

    def test_boolean_encoding(self):
        handler = BooleanHandler()
        assert handler.serialize_value(True) == "1"
        assert handler.serialize_value(False) == "0"
        assert handler.unserialize_value("0") is False

    def test_null_is_stored_as_sql_null(self):
        assert NullHandler().serialize_value(None) is None

    def test_integer_encoding(self):
        handler = IntegerHandler()
        assert handler.serialize_value(-42) == "-42"
        assert handler.unserialize_value("12345678901234567890") == 12345678901234567890

    def test_double_keeps_full_precision(self):
        handler = DoubleHandler()
        value = 0.1 + 0.2
        assert handler.unserialize_value(handler.serialize_value(value)) == value

    def test_double_infinity(self):
        handler = DoubleHandler()
        assert handler.unserialize_value(handler.serialize_value(float("inf"))) == float("inf")

    def test_empty_string(self):
        handler = StringHandler()
        assert handler.unserialize_value(handler.serialize_value("")) == ""


class TestDateTimeHandler:
    """Test datetime encoding."""

    def test_format(self):
        value = datetime(2017, 1, 1, 12, 30, 5, 123456, tzinfo=timezone.utc)
        assert DateTimeHandler().serialize_value(value) == "2017-01-01 12:30:05.123456+0000"

    def test_offset_is_preserved(self):
        handler = DateTimeHandler()
        tz = timezone(timedelta(hours=-5, minutes=-30))
        value = datetime(2020, 6, 1, 8, 0, tzinfo=tz)

        restored = handler.unserialize_value(handler.serialize_value(value))

        assert restored == value
        assert restored.utcoffset() == timedelta(hours=-5, minutes=-30)

    def test_naive_datetime_is_taken_as_utc(self):
        handler = DateTimeHandler()
        value = datetime(2020, 6, 1, 8, 0)

        restored = handler.unserialize_value(handler.serialize_value(value))

        assert restored == value.replace(tzinfo=timezone.utc)

    def test_years_before_1000_are_padded(self):
        handler = DateTimeHandler()
        value = datetime(999, 1, 1, tzinfo=timezone.utc)

        serialized = handler.serialize_value(value)

        assert serialized == "0999-01-01 00:00:00.000000+0000"
        assert handler.unserialize_value(serialized) == value

    def test_dates_are_not_datetimes(self):
        assert not DateTimeHandler().can_handle_value(datetime(2020, 1, 1).date())


class TestArrayHandler:
    """Test list/dict encoding."""

    def test_nested_list(self):
        handler = ArrayHandler()
        value = [1, [2, [3, {"a": None}]], "x"]
        assert handler.unserialize_value(handler.serialize_value(value)) == value

    def test_key_order_is_preserved(self):
        handler = ArrayHandler()
        value = {"z": 1, "a": 2, "m": 3}
        restored = handler.unserialize_value(handler.serialize_value(value))
        assert list(restored) == ["z", "a", "m"]

    def test_unicode(self):
        handler = ArrayHandler()
        assert handler.serialize_value(["café"]) == '["café"]'

    def test_unserializable_content_raises(self):
        with pytest.raises(UnsupportedTypeError):
            ArrayHandler().serialize_value([object()])


class TestObjectHandler:
    """Test generic object encoding."""

    def test_dataclass_decodes_to_namespace(self):
        handler = ObjectHandler()
        assert handler.can_handle_value(Point(1, 2))
        restored = handler.unserialize_value(handler.serialize_value(Point(1, 2)))
        assert restored == SimpleNamespace(x=1, y=2)

    def test_nested_objects(self):
        handler = ObjectHandler()
        value = SimpleNamespace(inner=SimpleNamespace(a=[1, 2]), label="x")
        assert handler.unserialize_value(handler.serialize_value(value)) == value

    def test_dict_fields_stay_dicts(self):
        handler = ObjectHandler()
        value = SimpleNamespace(a={"x": 1}, b=[{"y": SimpleNamespace(z=2)}])

        restored = handler.unserialize_value(handler.serialize_value(value))

        assert restored == value
        assert isinstance(restored.a, dict)
        assert isinstance(restored.b[0]["y"], SimpleNamespace)

    def test_objects_are_marked(self):
        raw = ObjectHandler().serialize_value(SimpleNamespace(a={"x": 1}))
        assert raw == '{"__object__": {"a": {"x": 1}}}'

    def test_plain_instance_skips_private_fields(self):
        class Thing:
            def __init__(self):
                self.public = 1
                self._private = 2

        handler = ObjectHandler()
        restored = handler.unserialize_value(handler.serialize_value(Thing()))
        assert restored == SimpleNamespace(public=1)

    def test_rejects_entities_callables_and_classes(self):
        handler = ObjectHandler()
        assert not handler.can_handle_value(SampleMetable())
        assert not handler.can_handle_value(lambda: None)
        assert not handler.can_handle_value(Point)
        assert not handler.can_handle_value(datetime(2020, 1, 1))

    def test_bind_returns_same_handler(self):
        handler = ObjectHandler()
        assert handler.bind(None) is handler
