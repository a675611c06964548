"""Conversion of collection values into JSON-compatible structures."""

from typing import Any

import attrs
from typing_extensions import Protocol, runtime_checkable


@runtime_checkable
class Serializable(Protocol):
    """Anything that knows how to turn itself into JSON-compatible data.

    Typed collections implement this themselves, so collections of
    collections serialize into nested lists.
    """

    def to_serializable(self) -> Any:
        ...


def serialize_value(value: Any) -> Any:
    """Serializes one collection value.

    :class:`Serializable` values are asked to serialize themselves, and
    ``attrs`` instances become dicts of their fields. Anything else is
    returned as-is.
    """
    if isinstance(value, Serializable):
        return value.to_serializable()
    if attrs.has(type(value)):
        return attrs.asdict(value, value_serializer=_serialize_field)
    return value


def _serialize_field(inst: Any, field: Any, value: Any) -> Any:
    del inst, field  # unused
    if isinstance(value, Serializable):
        return value.to_serializable()
    return value
