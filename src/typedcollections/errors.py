"""Exceptions raised by typed collections."""

from typing import Any


class TypeMismatchError(TypeError):
    """Raised when a value does not match a collection's declared type.

    This is raised synchronously at the point of insertion and is never caught
    by the collection itself. A ``TypeMismatchError`` is a ``TypeError``, so
    callers that already guard against ``TypeError`` keep working.
    """

    def __init__(self, declared_type: str, actual_type: str, value: Any = None):
        super().__init__(
            f'Expected value of type "{declared_type}", got "{actual_type}"'
        )
        self.declared_type = declared_type
        """Display name of the type the collection accepts."""
        self.actual_type = actual_type
        """Display name of the kind or class of the rejected value."""
        self.value = value
        """The rejected value itself."""
