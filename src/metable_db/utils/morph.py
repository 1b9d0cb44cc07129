"""Morph aliases: stable string names for mapped classes.

A polymorphic reference stores ``(morph alias, primary key)``. The alias
defaults to the class name and can be overridden with a ``__morph_alias__``
class attribute, which keeps stored references valid across renames.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import InstanceState, Mapper

from metable_db.errors import UnknownMorphTypeError

__all__ = [
    "instance_pk",
    "is_entity",
    "morph_alias",
    "normalize_key",
    "primary_key_column",
    "resolve_morph_class",
]


def normalize_key(key: str) -> str:
    """Lower-case a meta key."""
    return str(key).lower()


def morph_alias(obj_or_cls: Any) -> str:
    """
    Return the morph alias of a mapped class or instance.

    Parameters
    ----------
    obj_or_cls : Any
        Mapped class or instance

    Returns
    -------
    str
        ``__morph_alias__`` if the class defines one, else the class name
    """
    cls = obj_or_cls if isinstance(obj_or_cls, type) else type(obj_or_cls)
    return getattr(cls, "__morph_alias__", None) or cls.__name__


def resolve_morph_class(alias: str) -> type:
    """
    Find the mapped class registered under a morph alias.

    Only classes mapped on :class:`metable_db.models.orm.Base` are searched.

    Raises
    ------
    UnknownMorphTypeError
        If no mapped class carries the alias
    """
    from metable_db.models.orm.base import Base

    for mapper in Base.registry.mappers:
        if morph_alias(mapper.class_) == alias:
            return mapper.class_
    raise UnknownMorphTypeError(alias)


def is_entity(value: Any) -> bool:
    """Return True for instances of mapped classes (not the classes)."""
    if isinstance(value, type):
        return False
    return isinstance(sa_inspect(value, raiseerr=False), InstanceState)


def primary_key_column(cls: type):
    """Return the single primary key column of a mapped class."""
    mapper: Mapper = sa_inspect(cls)
    if len(mapper.primary_key) != 1:
        raise TypeError(
            f"{cls.__name__} must have a single-column primary key to be referenced"
        )
    return mapper.primary_key[0]


def instance_pk(obj: Any) -> Any | None:
    """Return the persisted primary key value of an entity, or None."""
    identity = sa_inspect(obj).identity
    if identity is None:
        return None
    return identity[0]
