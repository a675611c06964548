"""Collections of the primitive value kinds."""

from typing_extensions import Final

from . import collection
from .types import ValueKind


class BoolCollection(collection.TypedCollection[bool]):
    """A collection of ``bool`` values."""

    __slots__ = ()
    value_type: Final = ValueKind.BOOLEAN  # type: ignore[misc]


class IntCollection(collection.TypedCollection[int]):
    """A collection of ``int`` values. Booleans are not accepted."""

    __slots__ = ()
    value_type: Final = ValueKind.INTEGER  # type: ignore[misc]


class FloatCollection(collection.TypedCollection[float]):
    """A collection of ``float`` values. Integers are not accepted."""

    __slots__ = ()
    value_type: Final = ValueKind.FLOAT  # type: ignore[misc]


class StringCollection(collection.TypedCollection[str]):
    """A collection of ``str`` values."""

    __slots__ = ()
    value_type: Final = ValueKind.STRING  # type: ignore[misc]
