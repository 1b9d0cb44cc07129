"""Database package for metable_db."""

from __future__ import annotations

__all__ = [
    "BaseRepository",
    "MetaRepository",
    "create_db_and_tables",
    "get_engine",
    "get_session",
]

from .config import create_db_and_tables, get_engine, get_session
from .repository import BaseRepository, MetaRepository
