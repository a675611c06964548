"""Runtime type declarations and checks for typed collections.

A collection declares exactly one accepted value type. That is either one of
the primitive :class:`ValueKind` members, matched by exact kind with no
coercion, or a class, matched with ``isinstance``.

These functions are used by collection implementations for their own
checking; most users only need :class:`ValueKind`, which is exported to the
``typedcollections`` namespace.
"""

import enum
import logging
from typing import Any, Dict, Optional, Sequence, Type, Union

import structlog
from typing_extensions import TypeGuard

from . import errors

logger = structlog.wrap_logger(
    logging.getLogger(__name__), wrapper_class=structlog.stdlib.BoundLogger
)


class ValueKind(enum.Enum):
    """The primitive kinds of value a collection may be restricted to."""

    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"


DeclaredType = Union[ValueKind, type]
"""A normalized declared type: a primitive kind or a class."""

DeclaredTypeLike = Union[DeclaredType, str]
"""Anything :func:`declared_type` accepts."""

Key = Union[int, str]
"""The type of keys a collection may hold."""

_BUILTIN_KINDS: Dict[type, ValueKind] = {
    bool: ValueKind.BOOLEAN,
    int: ValueKind.INTEGER,
    float: ValueKind.FLOAT,
    str: ValueKind.STRING,
}


def declared_type(spec: DeclaredTypeLike) -> DeclaredType:
    """Normalizes a declared type.

    The builtin ``bool``, ``int``, ``float`` and ``str`` types and the string
    names of the kinds (``"integer"`` etc.) map to their :class:`ValueKind`.
    Any other class is returned unchanged and will be matched by
    ``isinstance``.
    """
    if isinstance(spec, ValueKind):
        return spec
    if isinstance(spec, str):
        try:
            return ValueKind(spec)
        except ValueError:
            raise TypeError(f"{spec!r} is not a known value kind") from None
    if isinstance(spec, type):
        return _BUILTIN_KINDS.get(spec, spec)
    raise TypeError(
        f"a declared type must be a ValueKind or a class, not {_typename(spec)}"
    )


def kind_of(value: Any) -> Optional[ValueKind]:
    """Returns the primitive kind of ``value``, or None for anything else."""
    # bool is a subclass of int, so it has to be checked first.
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, str):
        return ValueKind.STRING
    return None


def kind_name(value: Any) -> str:
    """The display name of a value's kind, as reported in errors."""
    if value is None:
        return "null"
    kind = kind_of(value)
    if kind is not None:
        return kind.value
    return _qualified_name(type(value))


def type_name(declared: DeclaredType) -> str:
    """The display name of a declared type."""
    if isinstance(declared, ValueKind):
        return declared.value
    return _qualified_name(declared)


def matches(value: Any, declared: DeclaredType) -> bool:
    """Checks whether ``value`` may be stored under the declared type."""
    if isinstance(declared, ValueKind):
        return kind_of(value) is declared
    return isinstance(value, declared)


def check(value: Any, declared: DeclaredType) -> None:
    """Raises :class:`errors.TypeMismatchError` if ``value`` does not match."""
    if matches(value, declared):
        return
    err = errors.TypeMismatchError(type_name(declared), kind_name(value), value)
    logger.debug(
        "value_rejected",
        declared_type=err.declared_type,
        actual_type=err.actual_type,
    )
    raise err


def is_key(key: object) -> TypeGuard[Key]:
    """Returns true if ``key`` can be used as a collection key.

    Booleans are excluded even though they are ints, since ``True`` and ``1``
    would otherwise silently address the same entry.
    """
    return isinstance(key, str) or (
        isinstance(key, int) and not isinstance(key, bool)
    )


def is_nonstringy_sequence(it: object) -> TypeGuard[Sequence]:
    """Returns true if a sequence is a "normal" sequence and not str or bytes.

    str and bytes are "weird" sequences because iterating them gives you
    another str or bytes instance for each character, and when used as a
    sequence is not what users want.
    """
    return not isinstance(it, (str, bytes)) and isinstance(it, Sequence)


def _qualified_name(typ: Type[Any]) -> str:
    if typ.__module__ == "builtins":
        return typ.__qualname__
    return f"{typ.__module__}.{typ.__qualname__}"


def _typename(x: object) -> str:
    return type(x).__name__
