"""Tests for entity reference handlers (model, collection)."""

from __future__ import annotations

import pytest

from metable_db.datatype import ModelCollection, ModelCollectionHandler, ModelHandler
from metable_db.errors import (
    DanglingReferenceError,
    SessionRequiredError,
    UnknownMorphTypeError,
    UnsupportedTypeError,
)
from metable_db.utils import morph_alias, resolve_morph_class
from sample_models import Label, OtherMetable, SampleMetable


class TestMorphAlias:
    """Test class aliases written into references."""

    def test_defaults_to_class_name(self):
        assert morph_alias(SampleMetable) == "SampleMetable"
        assert morph_alias(SampleMetable()) == "SampleMetable"

    def test_explicit_alias(self):
        assert morph_alias(OtherMetable) == "other"
        assert resolve_morph_class("other") is OtherMetable

    def test_unknown_alias(self):
        with pytest.raises(UnknownMorphTypeError):
            resolve_morph_class("Missing")


class TestModelHandler:
    """Test single entity references."""

    def test_datatype_identifier(self):
        assert ModelHandler().get_data_type() == "model"

    def test_compatibility(self, post):
        handler = ModelHandler()
        assert handler.can_handle_value(post)
        assert not handler.can_handle_value(SampleMetable)
        assert not handler.can_handle_value({"id": post.id})
        assert not handler.can_handle_value([post])

    def test_round_trip(self, session, post):
        handler = ModelHandler().bind(session)
        serialized = handler.serialize_value(post)

        assert serialized == f"SampleMetable:{post.id}"
        assert handler.unserialize_value(serialized) is post

    def test_uses_morph_alias(self, session, other):
        handler = ModelHandler().bind(session)
        assert handler.serialize_value(other) == f"other:{other.id}"
        assert handler.unserialize_value(f"other:{other.id}") is other

    def test_pending_entity_is_flushed(self, session):
        pending = SampleMetable(name="pending")
        session.add(pending)

        serialized = ModelHandler().serialize_value(pending)

        assert pending.id is not None
        assert serialized == f"SampleMetable:{pending.id}"

    def test_transient_entity_is_rejected(self):
        with pytest.raises(UnsupportedTypeError):
            ModelHandler().serialize_value(SampleMetable())

    def test_dangling_reference(self, session, post):
        handler = ModelHandler().bind(session)
        serialized = handler.serialize_value(post)
        session.delete(post)
        session.flush()

        with pytest.raises(DanglingReferenceError) as exc_info:
            handler.unserialize_value(serialized)
        assert exc_info.value.alias == "SampleMetable"

    def test_requires_session_to_load(self, post):
        with pytest.raises(SessionRequiredError):
            ModelHandler().unserialize_value(f"SampleMetable:{post.id}")

    def test_bind_returns_new_handler(self, session):
        handler = ModelHandler()
        bound = handler.bind(session)
        assert bound is not handler
        assert bound.session is session
        assert handler.session is None


class TestModelCollectionHandler:
    """Test ordered entity collection references."""

    def test_datatype_identifier(self):
        assert ModelCollectionHandler().get_data_type() == "collection"

    def test_compatibility(self, make_owner):
        handler = ModelCollectionHandler()
        a, b = make_owner(), make_owner()
        assert handler.can_handle_value(ModelCollection([a, b]))
        assert handler.can_handle_value([a, b])
        assert handler.can_handle_value(ModelCollection())
        assert not handler.can_handle_value([])
        assert not handler.can_handle_value([a, make_owner(OtherMetable)])
        assert not handler.can_handle_value([a, 1])
        assert not handler.can_handle_value(a)

    def test_round_trip_preserves_order(self, session, make_owner):
        handler = ModelCollectionHandler().bind(session)
        a, b, c = make_owner(), make_owner(), make_owner()
        value = ModelCollection([c, a, b])

        serialized = handler.serialize_value(value)
        restored = handler.unserialize_value(serialized)

        assert serialized == f"SampleMetable:{c.id},{a.id},{b.id}"
        assert isinstance(restored, ModelCollection)
        assert restored == value

    def test_empty_collection(self, session):
        handler = ModelCollectionHandler().bind(session)
        serialized = handler.serialize_value(ModelCollection())
        assert serialized == ":"
        assert handler.unserialize_value(serialized) == ModelCollection()

    def test_missing_entities_are_dropped(self, session, make_owner):
        handler = ModelCollectionHandler().bind(session)
        a, b, c = make_owner(), make_owner(), make_owner()
        serialized = handler.serialize_value([a, b, c])
        session.delete(b)
        session.flush()

        assert handler.unserialize_value(serialized) == [a, c]

    def test_requires_session_to_load(self, post):
        with pytest.raises(SessionRequiredError):
            ModelCollectionHandler().unserialize_value(f"SampleMetable:{post.id}")

    def test_string_primary_keys(self, session):
        handler = ModelCollectionHandler().bind(session)
        labels = [Label(code="red"), Label(code="blue")]
        session.add_all(labels)
        session.flush()

        serialized = handler.serialize_value(labels)

        assert serialized == "Label:red,blue"
        assert handler.unserialize_value(serialized) == labels

    def test_primary_key_with_separator_is_rejected(self, session):
        label = Label(code="a,b")
        session.add(label)
        session.flush()

        with pytest.raises(UnsupportedTypeError, match="must not contain"):
            ModelCollectionHandler().serialize_value([label])
