"""Handlers for references to ORM entities and collections of them.

References are stored as ``{morph alias}:{pk}`` and
``{morph alias}:{pk1,pk2,...}``. Decoding re-fetches the entities through
the session the handler is bound to.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from loguru import logger
from sqlalchemy import inspect as sa_inspect
from sqlalchemy import select
from sqlalchemy.orm import object_session

from metable_db.constants import DataType
from metable_db.datatype.base import Handler
from metable_db.errors import (
    DanglingReferenceError,
    SessionRequiredError,
    UnsupportedTypeError,
)
from metable_db.utils import (
    instance_pk,
    is_entity,
    morph_alias,
    primary_key_column,
    resolve_morph_class,
)

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

__all__ = ["ModelCollection", "ModelCollectionHandler", "ModelHandler"]


class ModelCollection(list):
    """List of entities of a single mapped class."""


def _has_single_pk(cls: type) -> bool:
    return len(sa_inspect(cls).primary_key) == 1


def _persisted_pk(entity: Any) -> Any:
    """Primary key of ``entity``, flushing it first if it is still pending."""
    pk = instance_pk(entity)
    if pk is None:
        session = object_session(entity)
        if session is not None:
            session.flush()
            pk = instance_pk(entity)
    if pk is None:
        raise UnsupportedTypeError(entity, "entity has not been persisted")
    return pk


def _coerce_pk(cls: type, raw: str) -> Any:
    column = primary_key_column(cls)
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return raw
    return python_type(raw)


class _EntityHandler(Handler):
    """Base for handlers that read entities back from a session."""

    def __init__(self, session: Session | None = None) -> None:
        self.session = session

    def bind(self, session: Session | None) -> Handler:
        return type(self)(session)

    def _require_session(self) -> Session:
        if self.session is None:
            raise SessionRequiredError(
                f"{type(self).__name__} needs a session to load referenced entities"
            )
        return self.session


class ModelHandler(_EntityHandler):
    """Handle a single persisted entity."""

    data_type = DataType.MODEL.value

    def can_handle_value(self, value: Any) -> bool:
        return is_entity(value) and _has_single_pk(type(value))

    def serialize_value(self, value: Any) -> str:
        return f"{morph_alias(value)}:{_persisted_pk(value)}"

    def unserialize_value(self, raw: str | None) -> Any:
        alias, _, pk = raw.partition(":")
        cls = resolve_morph_class(alias)
        entity = self._require_session().get(cls, _coerce_pk(cls, pk))
        if entity is None:
            raise DanglingReferenceError(alias, pk)
        return entity


class ModelCollectionHandler(_EntityHandler):
    """
    Handle an ordered collection of entities of one class.

    Accepts a :class:`ModelCollection` (possibly empty) or a non-empty list
    whose items are all entities of the same class. Entities deleted since
    the value was written are dropped from the decoded collection. Keys are
    joined with ``,``, so string primary keys containing a comma are
    rejected.
    """

    data_type = DataType.COLLECTION.value

    def can_handle_value(self, value: Any) -> bool:
        if not isinstance(value, list):
            return False
        if not value:
            return isinstance(value, ModelCollection)
        if not all(is_entity(item) for item in value):
            return False
        classes = {type(item) for item in value}
        return len(classes) == 1 and _has_single_pk(classes.pop())

    def serialize_value(self, value: list) -> str:
        if not value:
            return ":"
        pks = [str(_persisted_pk(item)) for item in value]
        if any("," in pk for pk in pks):
            raise UnsupportedTypeError(value, "primary keys must not contain ','")
        return f"{morph_alias(value[0])}:{','.join(pks)}"

    def unserialize_value(self, raw: str | None) -> ModelCollection:
        alias, _, pk_list = (raw or "").partition(":")
        if not alias or not pk_list:
            return ModelCollection()

        cls = resolve_morph_class(alias)
        pks = [_coerce_pk(cls, pk) for pk in pk_list.split(",")]
        column = primary_key_column(cls)
        rows = self._require_session().scalars(select(cls).where(column.in_(pks)))
        by_pk = {instance_pk(row): row for row in rows}

        missing = [pk for pk in pks if pk not in by_pk]
        if missing:
            logger.warning(f"Dropping missing {alias} entities from collection: {missing}")
        return ModelCollection(by_pk[pk] for pk in pks if pk in by_pk)
