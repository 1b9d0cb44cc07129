"""Runtime settings for metable_db."""

from __future__ import annotations

import os

from pydantic import BaseModel, Field

__all__ = ["DEFAULT_DATABASE_URL", "MetableSettings"]

DEFAULT_DATABASE_URL = "sqlite:///metable.db"


class MetableSettings(BaseModel):
    """
    Database settings used by the CLI.

    Attributes
    ----------
    database_url : str
        SQLAlchemy database URL
    echo : bool
        Echo SQL statements
    """

    database_url: str = Field(DEFAULT_DATABASE_URL, min_length=1)
    echo: bool = False

    @classmethod
    def from_env(cls, **overrides) -> MetableSettings:
        """
        Build settings from ``METABLE_DB_URL`` and ``METABLE_DB_ECHO``.

        Keyword arguments that are not None take precedence over the
        environment.
        """
        values = {}
        if url := os.getenv("METABLE_DB_URL"):
            values["database_url"] = url
        if echo := os.getenv("METABLE_DB_ECHO"):
            values["echo"] = echo.strip().lower() in ("1", "true", "yes", "on")
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
