"""Metable mixin: typed key/value meta for any mapped class.

Mix into a declarative model with a single-column integer primary key::

    class Post(Metable, Base):
        __tablename__ = "post"
        id: Mapped[int] = mapped_column(primary_key=True)

    post.set_meta("color", "red")
    post.get_meta("color")                        # "red"
    session.scalars(Post.where_meta(select(Post), "color", "red"))

Instances must belong to a session before meta is read or written. The
meta mapping is loaded on first access and every mutator updates both the
database and the loaded mapping, so no reload is needed after writes. The
mapping belongs to its owner instance and must not be mutated from several
threads at once.
"""

from __future__ import annotations

import operator as op
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, ClassVar

from loguru import logger
from sqlalchemy import Numeric, and_, cast, delete, distinct, event, func, select
from sqlalchemy.orm import aliased, object_session

from metable_db.constants import NUMERIC_OPERATORS, SortDirection
from metable_db.db.repository import MetaRepository
from metable_db.errors import SessionRequiredError, UnsupportedOperatorError
from metable_db.models.orm.meta import Meta
from metable_db.utils import instance_pk, morph_alias, normalize_key, primary_key_column

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.sql.elements import ColumnElement

    from metable_db.models.orm.meta import MetaBase

__all__ = ["Metable"]

_UNSET = object()

_STRING_OPERATORS = {
    "=": op.eq,
    "==": op.eq,
    "!=": op.ne,
    "<>": op.ne,
    "<": op.lt,
    "<=": op.le,
    ">": op.gt,
    ">=": op.ge,
    "like": lambda column, value: column.like(value),
    "not like": lambda column, value: column.not_like(value),
}

_NUMERIC_OPERATORS = {
    "<": op.lt,
    "<=": op.le,
    ">": op.gt,
    ">=": op.ge,
    "=": op.eq,
    "<>": op.ne,
    "!=": op.ne,
}


def _keys(key_or_keys: str | Iterable[str]) -> list[str]:
    if isinstance(key_or_keys, str):
        key_or_keys = [key_or_keys]
    return list(dict.fromkeys(normalize_key(key) for key in key_or_keys))


class Metable:
    """
    Mixin attaching typed key/value meta to a mapped class.

    Attributes
    ----------
    meta_class : type[MetaBase]
        Record class used to store meta; override on the owner class to
        use another table
    meta : dict[str, MetaBase]
        Loaded meta records keyed by lower-cased key
    """

    meta_class: ClassVar[type[MetaBase]] = Meta

    # ------------------------------------------------------------------
    # Relation
    # ------------------------------------------------------------------

    def _meta_repository(self) -> MetaRepository:
        session = object_session(self)
        if session is None:
            raise SessionRequiredError(
                f"{type(self).__name__} must be added to a session to use meta"
            )
        if instance_pk(self) is None:
            session.flush()
        return MetaRepository(session, self.meta_class)

    def _meta_owner(self) -> tuple[str, Any]:
        return morph_alias(self), instance_pk(self)

    @property
    def meta(self) -> dict[str, MetaBase]:
        cache = self.__dict__.get("_meta_cache")
        if cache is None:
            cache = self.load_meta()
        return cache

    def load_meta(self) -> dict[str, MetaBase]:
        """(Re)load the meta mapping from the database."""
        repo = self._meta_repository()
        records = repo.list_for_owner(*self._meta_owner())
        cache = {record.key: record for record in records}
        self.__dict__["_meta_cache"] = cache
        return cache

    def _make_meta(self, key: str, value: Any) -> MetaBase:
        owner_type, owner_id = self._meta_owner()
        return self.meta_class(
            metable_type=owner_type,
            metable_id=owner_id,
            key=normalize_key(key),
            value=value,
        )

    # ------------------------------------------------------------------
    # Key/value operations
    # ------------------------------------------------------------------

    def set_meta(self, key: str, value: Any) -> None:
        """
        Add or update the value of the meta at ``key``.

        Parameters
        ----------
        key : str
            Meta key (case-insensitive)
        value : Any
            Any value a registered handler accepts

        Raises
        ------
        UnsupportedTypeError
            If no handler accepts ``value``
        """
        key = normalize_key(key)
        repo = self._meta_repository()

        meta = self.get_meta_record(key)
        if meta is not None:
            meta.value = value
            repo.update(meta)
        else:
            meta = repo.create(self._make_meta(key, value))
            self.meta[key] = meta
        logger.debug(f"set meta {key!r} ({meta.type}) on {morph_alias(self)}:{meta.metable_id}")

    def set_many_meta(self, values: Mapping[str, Any]) -> None:
        """
        Add or update several keys in one flush; other keys are kept.

        Every value is serialized before any record changes, so an
        unsupported value leaves all meta as it was.
        """
        repo = self._meta_repository()
        encoded = {
            normalize_key(key): self.meta_class.encode_value(value)
            for key, value in dict(values).items()
        }

        owner_type, owner_id = self._meta_owner()
        created = {}
        for key, (type_tag, raw_value) in encoded.items():
            meta = self.get_meta_record(key)
            if meta is None:
                meta = self.meta_class(metable_type=owner_type, metable_id=owner_id, key=key)
                created[key] = meta
            meta.set_raw_value(type_tag, raw_value)
        repo.create_many(created.values())
        self.meta.update(created)
        logger.debug(f"set {len(values)} meta keys on {morph_alias(self)}:{instance_pk(self)}")

    def sync_meta(self, values: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> None:
        """
        Replace all meta with the keys and values provided.

        Existing meta not present in ``values`` is deleted. Delete and
        insert run in the session's current transaction.
        """
        repo = self._meta_repository()
        records = {}
        for key, value in dict(values).items():
            meta = self._make_meta(key, value)
            records[meta.key] = meta

        deleted = repo.delete_for_owner(*self._meta_owner())
        repo.create_many(records.values())
        self.__dict__["_meta_cache"] = records
        logger.debug(
            f"synced meta on {morph_alias(self)}:{instance_pk(self)} "
            f"({deleted} removed, {len(records)} written)"
        )

    def get_meta(self, key: str, default: Any = None) -> Any:
        """
        Return the value of the meta at ``key``, or ``default``.

        Parameters
        ----------
        key : str
            Meta key (case-insensitive)
        default : Any, optional
            Returned when no meta exists at ``key``, by default None
        """
        meta = self.get_meta_record(key)
        if meta is None:
            return default
        return meta.value

    def get_all_meta(self) -> dict[str, Any]:
        """Return every meta value keyed by key."""
        return {key: meta.value for key, meta in self.meta.items()}

    def has_meta(self, key: str) -> bool:
        return normalize_key(key) in self.meta

    def remove_meta(self, key: str) -> None:
        """Delete the meta at ``key``. Does nothing if it is absent."""
        key = normalize_key(key)
        meta = self.get_meta_record(key)
        if meta is None:
            logger.debug(f"no meta {key!r} to remove on {morph_alias(self)}:{instance_pk(self)}")
            return
        self._meta_repository().delete(meta)
        del self.meta[key]

    def purge_meta(self) -> None:
        """Delete all meta attached to this record."""
        deleted = self._meta_repository().delete_for_owner(*self._meta_owner())
        self.__dict__["_meta_cache"] = {}
        logger.debug(f"purged {deleted} meta from {morph_alias(self)}:{instance_pk(self)}")

    def get_meta_record(self, key: str) -> MetaBase | None:
        """Return the meta record at ``key``, or None."""
        return self.meta.get(normalize_key(key))

    # ------------------------------------------------------------------
    # Query scopes
    # ------------------------------------------------------------------

    @classmethod
    def _serialize_for_query(cls, value: Any) -> str | None:
        handler = cls.meta_class.datatypes.get_handler_for_value(value)
        return handler.serialize_value(value)

    @classmethod
    def _meta_exists(cls, *criteria: ColumnElement) -> ColumnElement[bool]:
        """Correlated EXISTS over the owner's meta matching ``criteria``."""
        meta = cls.meta_class
        return (
            select(meta.id)
            .where(
                meta.metable_type == morph_alias(cls),
                meta.metable_id == primary_key_column(cls),
                *criteria,
            )
            .exists()
        )

    @classmethod
    def where_has_meta(cls, stmt: Select, key: str | Iterable[str]) -> Select:
        """
        Restrict to records having meta at ``key``.

        If several keys are given, records having any of them match.
        """
        return stmt.where(cls._meta_exists(cls.meta_class.key.in_(_keys(key))))

    @classmethod
    def where_has_meta_keys(cls, stmt: Select, keys: Iterable[str]) -> Select:
        """Restrict to records having meta for every key in ``keys``."""
        keys = _keys(keys)
        meta = cls.meta_class
        matched = (
            select(func.count(distinct(meta.key)))
            .where(
                meta.metable_type == morph_alias(cls),
                meta.metable_id == primary_key_column(cls),
                meta.key.in_(keys),
            )
            .scalar_subquery()
        )
        return stmt.where(matched == len(keys))

    @classmethod
    def where_meta(
        cls,
        stmt: Select,
        key: str,
        operator: Any,
        value: Any = _UNSET,
    ) -> Select:
        """
        Restrict to records whose meta at ``key`` compares to ``value``.

        If ``value`` is omitted, ``operator`` is taken as the value and
        compared with ``=``. Non-string values are serialized first and the
        comparison runs on the stored string, so ``<``, ``<=``, ``>`` and
        ``>=`` compare as strings. Use :meth:`where_meta_numeric` for
        numbers.

        Raises
        ------
        UnsupportedOperatorError
            If ``operator`` is not a supported comparison
        """
        if value is _UNSET:
            operator, value = "=", operator

        compare = _STRING_OPERATORS.get(str(operator).lower())
        if compare is None:
            raise UnsupportedOperatorError(operator)

        if not isinstance(value, str):
            value = cls._serialize_for_query(value)

        meta = cls.meta_class
        return stmt.where(
            cls._meta_exists(meta.key == normalize_key(key), compare(meta.raw_value, value))
        )

    @classmethod
    def where_meta_numeric(
        cls,
        stmt: Select,
        key: str,
        operator: str,
        value: float,
    ) -> Select:
        """
        Restrict to records whose meta at ``key`` compares numerically.

        An operator outside ``< <= > >= = <> !=`` is replaced with ``=``.
        """
        if operator not in NUMERIC_OPERATORS:
            operator = "="
        compare = _NUMERIC_OPERATORS[operator]

        meta = cls.meta_class
        numeric_value = cast(meta.raw_value, Numeric(asdecimal=False))
        return stmt.where(
            cls._meta_exists(meta.key == normalize_key(key), compare(numeric_value, float(value)))
        )

    @classmethod
    def where_meta_in(cls, stmt: Select, key: str, values: Iterable[Any]) -> Select:
        """Restrict to records whose meta at ``key`` is one of ``values``."""
        serialized = [
            value if isinstance(value, str) else cls._serialize_for_query(value)
            for value in values
        ]
        meta = cls.meta_class
        return stmt.where(
            cls._meta_exists(meta.key == normalize_key(key), meta.raw_value.in_(serialized))
        )

    @classmethod
    def _join_meta(cls, stmt: Select, key: str):
        """LEFT OUTER JOIN an alias of the meta table for one key."""
        meta = aliased(cls.meta_class)
        stmt = stmt.outerjoin(
            meta,
            and_(
                meta.metable_id == primary_key_column(cls),
                meta.metable_type == morph_alias(cls),
                meta.key == normalize_key(key),
            ),
        )
        return stmt, meta

    @classmethod
    def order_by_meta(cls, stmt: Select, key: str, direction: str = "asc") -> Select:
        """
        Order by the string value of the meta at ``key``.

        ``direction`` is ``"asc"`` (any case) for ascending, anything else
        for descending. Records without the key sort as NULL.
        """
        stmt, meta = cls._join_meta(stmt, key)
        column = meta.raw_value
        if SortDirection.normalize(direction) is SortDirection.ASC:
            return stmt.order_by(column.asc())
        return stmt.order_by(column.desc())

    @classmethod
    def order_by_meta_numeric(cls, stmt: Select, key: str, direction: str = "asc") -> Select:
        """Order by the numeric value of the meta at ``key``."""
        stmt, meta = cls._join_meta(stmt, key)
        column = cast(meta.raw_value, Numeric(asdecimal=False))
        if SortDirection.normalize(direction) is SortDirection.ASC:
            return stmt.order_by(column.asc())
        return stmt.order_by(column.desc())


@event.listens_for(Metable, "after_delete", propagate=True)
def _purge_meta_after_delete(mapper, connection, target):
    """Delete the meta rows of a deleted owner."""
    table = target.meta_class.__table__
    connection.execute(
        delete(table).where(
            table.c.metable_type == morph_alias(target),
            table.c.metable_id == instance_pk(target),
        )
    )
    target.__dict__.pop("_meta_cache", None)
