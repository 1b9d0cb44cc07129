"""Handler interface for meta value serialization."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

__all__ = ["Handler"]


class Handler(ABC):
    """
    Strategy converting one category of values to and from text.

    Subclasses declare a unique ``data_type`` tag, which is stored next to
    the serialized payload and selects the handler again on read.

    For every value accepted by :meth:`can_handle_value`,
    ``unserialize_value(serialize_value(value)) == value``.
    """

    data_type: ClassVar[str]

    def get_data_type(self) -> str:
        """Return the tag written to the ``type`` column."""
        return self.data_type

    @abstractmethod
    def can_handle_value(self, value: Any) -> bool:
        """Return True if this handler can serialize ``value``."""

    @abstractmethod
    def serialize_value(self, value: Any) -> str | None:
        """Convert ``value`` to its stored text form."""

    @abstractmethod
    def unserialize_value(self, raw: str | None) -> Any:
        """Convert stored text back to a value."""

    def bind(self, session: Session | None) -> Handler:
        """Return a handler able to read from ``session``.

        Handlers that never touch the store return themselves.
        """
        return self

    def __repr__(self) -> str:
        return f"{type(self).__name__}(data_type={self.data_type!r})"
