"""Meta record model: MetaBase, Meta."""

from __future__ import annotations

from typing import Any, ClassVar

from sqlalchemy import Index, UniqueConstraint
from sqlalchemy.orm import Mapped, declared_attr, mapped_column, object_session

from metable_db.datatype import HandlerRegistry, default_registry
from metable_db.models.orm.base import Base
from metable_db.utils import MetaKey, MorphId, MorphType, Pk, RawValue, TypeTag

__all__ = ["Meta", "MetaBase"]


class MetaBase(Base):
    """
    Columns and value handling shared by meta record classes.

    Subclass with a ``__tablename__`` to store meta in another table, and
    point ``Metable.meta_class`` at the subclass.

    Attributes
    ----------
    id : int
        Integer primary key
    metable_type : str
        Morph alias of the owning class
    metable_id : int
        Primary key of the owning record
    key : str
        Lower-cased key, unique per owner
    type : str
        Tag of the handler that produced ``raw_value``
    raw_value : str | None
        Serialized value (column ``value``)
    value : Any
        Decoded value; assigning re-selects the handler
    datatypes : HandlerRegistry
        Handlers used to encode and decode values (class attribute)
    """

    __abstract__ = True

    datatypes: ClassVar[HandlerRegistry] = default_registry()

    id: Mapped[Pk]

    metable_type: Mapped[MorphType]

    metable_id: Mapped[MorphId]

    key: Mapped[MetaKey]

    type: Mapped[TypeTag]

    raw_value: Mapped[RawValue] = mapped_column("value")

    @declared_attr.directive
    def __table_args__(cls) -> tuple:
        return (
            UniqueConstraint(
                "metable_type",
                "metable_id",
                "key",
                name=f"uq_{cls.__tablename__}_owner_key",
            ),
            Index(f"ix_{cls.__tablename__}_owner", "metable_type", "metable_id"),
        )

    @property
    def value(self) -> Any:
        # Cache is tied to the (type, raw_value) pair it was decoded from
        cached = self.__dict__.get("_value_cache")
        if cached is not None and cached[:2] == (self.type, self.raw_value):
            return cached[2]

        handler = self.datatypes.get_handler_for_type(self.type)
        value = handler.bind(object_session(self)).unserialize_value(self.raw_value)
        self.__dict__["_value_cache"] = (self.type, self.raw_value, value)
        return value

    @value.setter
    def value(self, value: Any) -> None:
        self.set_raw_value(*self.encode_value(value))

    @classmethod
    def encode_value(cls, value: Any) -> tuple[str, str | None]:
        """
        Serialize ``value`` without touching any record.

        Returns
        -------
        tuple[str, str | None]
            Handler tag and serialized value

        Raises
        ------
        UnsupportedTypeError
            If no handler accepts or can serialize ``value``
        """
        handler = cls.datatypes.get_handler_for_value(value)
        return handler.get_data_type(), handler.serialize_value(value)

    def set_raw_value(self, type_tag: str, raw_value: str | None) -> None:
        """Store an already serialized value under ``type_tag``."""
        self.type = type_tag
        self.raw_value = raw_value
        # Next read decodes from storage, as a fresh load would
        self.__dict__.pop("_value_cache", None)

    def get_raw_value(self) -> str | None:
        return self.raw_value

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(key={self.key!r}, type={self.type!r}, "
            f"owner={self.metable_type}:{self.metable_id})"
        )


class Meta(MetaBase):
    """Typed key/value entries attached to owning records."""

    __tablename__ = "meta"
