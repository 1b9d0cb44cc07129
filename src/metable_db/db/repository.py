"""Repository pattern for data access layer."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.orm import DeclarativeBase, Session

if TYPE_CHECKING:
    from metable_db.models.orm.meta import MetaBase

__all__ = [
    "BaseRepository",
    "MetaRepository",
]

T = TypeVar("T", bound=DeclarativeBase)


class BaseRepository(Generic[T]):
    """
    Base repository providing create, update and delete operations.

    Parameters
    ----------
    session : Session
        SQLAlchemy database session
    model_class : type[T]
        Mapped model class

    Examples
    --------
    >>> from metable_db.models import Meta
    >>> repo = BaseRepository(session, Meta)
    >>> meta = repo.create(meta)
    """

    def __init__(self, session: Session, model_class: type[T]) -> None:
        """Initialize repository."""
        self.session = session
        self.model_class = model_class

    def create(self, obj: T) -> T:
        """
        Create new entity.

        Parameters
        ----------
        obj : T
            Entity instance

        Returns
        -------
        T
            Created entity (with DB-generated fields populated)
        """
        self.session.add(obj)
        self.session.flush()
        self.session.refresh(obj)
        return obj

    def create_many(self, objs: Iterable[T]) -> list[T]:
        """Insert several entities in one flush."""
        objs = list(objs)
        self.session.add_all(objs)
        self.session.flush()
        return objs

    def update(self, obj: T) -> T:
        """
        Update existing entity.

        Parameters
        ----------
        obj : T
            Entity instance with modifications

        Returns
        -------
        T
            Updated entity
        """
        self.session.add(obj)
        self.session.flush()
        return obj

    def delete(self, obj: T) -> None:
        """
        Delete entity.

        Parameters
        ----------
        obj : T
            Entity instance to delete
        """
        self.session.delete(obj)
        self.session.flush()


class MetaRepository(BaseRepository["MetaBase"]):
    """
    Repository for meta records of one owner class.

    Provides the owner-scoped operations the Metable mixin relies on:
    load all records for an owner and delete all records for an owner.

    Examples
    --------
    >>> repo = MetaRepository(session, Meta)
    >>> records = repo.list_for_owner("Post", 1)
    """

    def list_for_owner(self, owner_type: str, owner_id: Any) -> list[MetaBase]:
        """
        List meta records attached to an owner, ordered by key.

        Parameters
        ----------
        owner_type : str
            Morph alias of the owner class
        owner_id : Any
            Owner primary key

        Returns
        -------
        list[MetaBase]
            Meta records of the owner
        """
        stmt = (
            select(self.model_class)
            .where(
                self.model_class.metable_type == owner_type,
                self.model_class.metable_id == owner_id,
            )
            .order_by(self.model_class.key)
        )
        return list(self.session.execute(stmt).scalars().all())

    def delete_for_owner(self, owner_type: str, owner_id: Any) -> int:
        """
        Delete every meta record attached to an owner.

        Matching objects already in the session are marked deleted.

        Returns
        -------
        int
            Number of rows deleted
        """
        stmt = delete(self.model_class).where(
            self.model_class.metable_type == owner_type,
            self.model_class.metable_id == owner_id,
        )
        result = self.session.execute(stmt)
        return result.rowcount
