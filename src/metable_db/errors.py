"""Exception hierarchy for metable_db."""

from __future__ import annotations

__all__ = [
    "DanglingReferenceError",
    "MetableError",
    "SessionRequiredError",
    "UnknownMorphTypeError",
    "UnknownTypeTagError",
    "UnsupportedOperatorError",
    "UnsupportedTypeError",
]


class MetableError(Exception):
    """Base class for all metable_db errors."""


class UnsupportedTypeError(MetableError, TypeError):
    """No registered handler accepts the value."""

    def __init__(self, value: object, reason: str | None = None) -> None:
        self.value = value
        reason = reason or "no registered handler accepts it"
        super().__init__(
            f"Cannot store value of type {type(value).__name__!r} as meta: {reason}"
        )


class UnknownTypeTagError(MetableError, LookupError):
    """A stored type tag names no registered handler."""

    def __init__(self, tag: str) -> None:
        self.tag = tag
        super().__init__(f"No handler registered for meta type {tag!r}")


class UnknownMorphTypeError(MetableError, LookupError):
    """A stored morph alias names no mapped class."""

    def __init__(self, alias: str) -> None:
        self.alias = alias
        super().__init__(f"No mapped class registered under morph alias {alias!r}")


class DanglingReferenceError(MetableError, LookupError):
    """A meta value references an entity that no longer exists."""

    def __init__(self, alias: str, pk: object) -> None:
        self.alias = alias
        self.pk = pk
        super().__init__(f"Referenced entity {alias}:{pk} no longer exists")


class SessionRequiredError(MetableError):
    """The operation needs an object attached to a Session."""


class UnsupportedOperatorError(MetableError, ValueError):
    """A comparison operator outside the accepted set."""

    def __init__(self, operator: str) -> None:
        self.operator = operator
        super().__init__(f"Unsupported comparison operator {operator!r}")
