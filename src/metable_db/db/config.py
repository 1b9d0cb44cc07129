"""Database engine and session management."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

if TYPE_CHECKING:
    from collections.abc import Generator

    from sqlalchemy.engine import Engine

__all__ = ["create_db_and_tables", "get_engine", "get_session"]


def get_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create database engine.

    Parameters
    ----------
    database_url : str
        Database connection URL
        Examples:
        - In-memory: "sqlite:///:memory:"
        - File: "sqlite:///./metable.db"
        - PostgreSQL: "postgresql+psycopg://user@host/db"
    echo : bool, optional
        Whether to echo SQL statements, by default False

    Returns
    -------
    Engine
        SQLAlchemy engine instance

    Notes
    -----
    In-memory SQLite uses StaticPool so every session sees the same
    database (each new connection to :memory: creates a separate one).
    """
    kwargs = {}
    if database_url.startswith("sqlite") and ":memory:" in database_url:
        kwargs = {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }

    return create_engine(database_url, echo=echo, **kwargs)


def create_db_and_tables(engine: Engine) -> None:
    """
    Create all database tables.

    Parameters
    ----------
    engine : Engine
        SQLAlchemy engine instance

    Examples
    --------
    >>> engine = get_engine("sqlite:///:memory:")
    >>> create_db_and_tables(engine)
    """
    from metable_db.models.orm import Base, Meta  # noqa: F401

    Base.metadata.create_all(engine)


@contextmanager
def get_session(engine: Engine) -> Generator[Session, None, None]:
    """
    Provide transactional database session.

    Automatically commits on success, rolls back on exception.

    Parameters
    ----------
    engine : Engine
        SQLAlchemy engine instance

    Yields
    ------
    Session
        SQLAlchemy session

    Examples
    --------
    >>> engine = get_engine("sqlite:///:memory:")
    >>> with get_session(engine) as session:
    ...     post.set_meta("color", "red")  # Auto-committed
    """
    session = Session(engine)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
