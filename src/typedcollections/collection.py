"""The ordered, type-checked collection.

A :class:`TypedCollection` is an ordered map from ``int`` or ``str`` keys to
values of a single declared type. It can be used like a list (``add`` appends
under the next integer key) or like a dict (``coll[key] = value``), and every
value is checked against the declared type on the way in.
"""

import json
import logging
from typing import (
    Any,
    ClassVar,
    Generic,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
    Union,
    overload,
)

import structlog
from typing_extensions import Self

from . import _cursor
from . import _store
from . import options
from . import serialization
from . import types
from .types import Key

_V = TypeVar("_V")
_T = TypeVar("_T")

logger = structlog.wrap_logger(
    logging.getLogger(__name__), wrapper_class=structlog.stdlib.BoundLogger
)

Items = Union[Mapping[Key, _V], Sequence[_V], "TypedCollection[_V]"]
"""What a collection can be built from: a key/value mapping or plain values."""


class TypedCollection(Generic[_V]):
    """An ordered collection whose values all share one declared type.

    The declared type is fixed for the life of the collection. It is either
    set by a subclass::

        class PointCollection(TypedCollection[Point]):
            value_type = Point

    or given when building a collection directly::

        points = TypedCollection({"origin": Point(0, 0)}, value_type=Point)

    Builtin ``bool``, ``int``, ``float`` and ``str`` are matched by exact kind
    (an ``int`` never goes into a ``float`` collection, and ``True`` is not an
    ``int``); any other class is matched with ``isinstance``.

    Keys are unique and kept in insertion order. Overwriting a key keeps its
    position. Values that fail the type check raise
    :class:`~typedcollections.errors.TypeMismatchError` and leave the
    collection unchanged.

    Alongside normal iteration, the collection keeps a cursor
    (:meth:`current`, :meth:`advance`, :meth:`restart`, ...) that stays on the
    same entry across mutations where it can.
    """

    __slots__ = ("_declared", "_store", "_cursor", "_iteration", "_replace_mode")

    value_type: ClassVar[Optional[types.DeclaredTypeLike]] = None
    """The type a subclass accepts. None means it is given per instance."""

    def __init__(
        self,
        items: "Items[_V]" = (),
        *,
        value_type: Optional[types.DeclaredTypeLike] = None,
        iteration: options.IterationModeStr = options.IterationMode.SNAPSHOT,
        replace_mode: options.ReplaceModeStr = options.ReplaceMode.ATOMIC,
    ):
        """Creates a new collection.

        :param items: The initial entries, as a mapping of key to value or a
            sequence of values (which get keys ``0, 1, 2, ...``). Every value
            is checked as if it were added with :meth:`add_by_key`.
        :param value_type: The accepted value type. Required unless the class
            declares ``value_type``; if both are given they must agree.
        :param iteration: Whether ``for value in coll`` iterates over a
            snapshot or drives the collection's cursor.
            See :class:`~options.IterationMode`.
        :param replace_mode: How :meth:`replace_all` (and so construction)
            handles a wrongly-typed item. See :class:`~options.ReplaceMode`.
        """
        self._declared = _resolve_declared(type(self), value_type)
        self._iteration = options.IterationMode(iteration)
        self._replace_mode = options.ReplaceMode(replace_mode)
        self._store: _store.OrderedKeyedStore[_V] = _store.OrderedKeyedStore()
        self._cursor = _cursor.Cursor(self._store)
        if items:
            self._replace(items)

    # Configuration

    @property
    def declared_type(self) -> types.DeclaredType:
        """The normalized type every value in this collection matches."""
        return self._declared

    @property
    def iteration_mode(self) -> options.IterationMode:
        return self._iteration

    @property
    def replace_mode(self) -> options.ReplaceMode:
        return self._replace_mode

    # Reading

    def __getitem__(self, key: Key) -> _V:
        """Gets the value at ``key``. Raises KeyError if there is none.

        Use :meth:`get` to read a key that may be missing.
        """
        if not types.is_key(key):
            raise KeyError(key)
        return self._store[key]

    @overload
    def get(self, key: Key) -> Optional[_V]:
        ...

    @overload
    def get(self, key: Key, default: _T) -> Union[_V, _T]:
        ...

    def get(
        self, key: Key, default: Union[_V, _T, None] = None
    ) -> Union[_V, _T, None]:
        """Gets the value at ``key``, or ``default`` if there is none."""
        if not types.is_key(key):
            return default
        return self._store.get(key, default)

    def exists(self, key: object) -> bool:
        """True if there is an entry at ``key``."""
        return types.is_key(key) and key in self._store

    __contains__ = exists

    def count(self) -> int:
        """The number of entries."""
        return len(self._store)

    __len__ = count

    def keys(self) -> List[Key]:
        """A copy of the keys, in order."""
        return self._store.keys()

    def values(self) -> List[_V]:
        """A copy of the values, in order."""
        return self._store.values()

    def items(self) -> List[Tuple[Key, _V]]:
        """A copy of the ``(key, value)`` pairs, in order."""
        return self._store.items()

    # Writing

    def __setitem__(self, key: Key, value: _V) -> None:
        """Sets an entry. See :meth:`add_by_key` for details."""
        self.add_by_key(key, value)

    def __delitem__(self, key: Key) -> None:
        """Removes an entry. Missing keys are ignored; see :meth:`remove`."""
        self.remove(key)

    def add(self, value: _V) -> Self:
        """Appends a value under the next integer key.

        The key is one greater than the highest integer key in the collection,
        or ``0`` if it has no integer keys.

        :return: ``self``, to enable method chaining.
        """
        types.check(value, self._declared)
        anchor = self._cursor.anchor()
        self._store.append(value)
        self._cursor.resync_set(anchor)
        return self

    def add_by_key(self, key: Key, value: _V) -> Self:
        """Sets the value at ``key``.

        An existing key keeps its place in the order; a new key goes last.

        :return: ``self``, to enable method chaining.
        """
        _check_key(key)
        types.check(value, self._declared)
        anchor = self._cursor.anchor()
        self._store.set(key, value)
        self._cursor.resync_set(anchor)
        return self

    def remove(self, key: Key) -> Self:
        """Removes the entry at ``key``. Does nothing if there is none.

        Keys that cannot be in a collection (such as ``True`` or ``1.0``) are
        never found, so they are ignored too.

        If the cursor was on the removed entry it moves to the entry that
        followed it, or restarts if the removed entry was the last one.

        :return: ``self``, to enable method chaining.
        """
        if not types.is_key(key) or key not in self._store:
            return self
        anchor = self._cursor.anchor()
        was_at_last = self._cursor.at_last()
        self._store.remove(key)
        self._cursor.resync_removed(key, anchor, was_at_last)
        return self

    def clear(self) -> None:
        """Removes every entry and restarts the cursor."""
        self._store.clear()
        self._cursor.lose_place()

    def replace_all(self, items: "Items[_V]") -> Self:
        """Replaces the whole contents of the collection.

        Each item is set as if by :meth:`add_by_key`. In the default
        :attr:`~options.ReplaceMode.ATOMIC` mode every item is checked first,
        so a bad item raises without touching the collection. In
        :attr:`~options.ReplaceMode.INCREMENTAL` mode the collection is
        cleared first and a bad item raises with only the items before it in
        place.

        :return: ``self``, to enable method chaining.
        """
        self._replace(items)
        logger.debug(
            "collection_replaced",
            collection=type(self).__name__,
            count=len(self._store),
            mode=self._replace_mode.value,
        )
        return self

    def _replace(self, items: "Items[_V]") -> None:
        entries = list(_entries_of(items))
        if self._replace_mode is options.ReplaceMode.ATOMIC:
            for key, value in entries:
                _check_key(key)
                types.check(value, self._declared)
        anchor = self._cursor.anchor()
        self._store.clear()
        try:
            for key, value in entries:
                _check_key(key)
                types.check(value, self._declared)
                self._store.set(key, value)
        finally:
            self._cursor.resync_replaced(anchor)

    # Cursor

    @property
    def position(self) -> int:
        """The cursor's position in key order."""
        return self._cursor.position

    def valid(self) -> bool:
        """True if the cursor is on an entry."""
        return self._cursor.valid()

    def current(self) -> _V:
        """The value under the cursor. Raises IndexError if not :meth:`valid`."""
        return self._cursor.current()

    def current_key(self) -> Key:
        """The key under the cursor. Raises IndexError if not :meth:`valid`."""
        return self._cursor.current_key()

    def advance(self) -> None:
        """Moves the cursor forward by one entry."""
        self._cursor.advance()

    def restart(self) -> None:
        """Moves the cursor back to the first entry."""
        self._cursor.restart()

    # Iteration

    def __iter__(self) -> Iterator[_V]:
        """Iterates over the values, in order.

        Whether mutations made during the loop are seen depends on the
        collection's :attr:`iteration_mode`.
        """
        if self._iteration is options.IterationMode.LIVE:
            return self.iter_live()
        return iter(self._store.values())

    def iter_live(self) -> Iterator[_V]:
        """Iterates over the values by driving the collection's cursor.

        The cursor is restarted when the loop begins. Entries removed during
        the loop are not visited and entries added at the end are. Removing
        the entry the loop is on continues with the entry after it; if that
        was the last entry, the loop ends.

        The cursor is shared, so nested or interleaved live loops over the
        same collection interfere with each other.
        """
        cursor = self._cursor
        cursor.restart()
        while cursor.valid():
            yield cursor.current()
            resync = cursor.take_resync()
            if resync is _cursor.Resync.RESTARTED:
                return
            if resync is not _cursor.Resync.LANDED:
                cursor.advance()

    # Serialization

    def to_serializable(self) -> List[Any]:
        """Converts the collection into a list of its values.

        Keys are dropped: the result is always a list, even for string keys.
        Values that can serialize themselves (including nested collections
        and ``attrs`` instances) are serialized.
        """
        return [serialization.serialize_value(value) for value in self._store.values()]

    def to_json(self, **kwargs: Any) -> str:
        """Serializes the collection as a JSON array.

        Keyword arguments are passed to :func:`json.dumps`.
        """
        return json.dumps(self.to_serializable(), **kwargs)

    # Copying and comparison

    def copy(self) -> Self:
        """A new collection of the same class and options with the same entries.

        The values themselves are not copied, and the cursor starts at 0.
        """
        return type(self)(
            dict(self._store.items()),
            value_type=self._declared,
            iteration=self._iteration,
            replace_mode=self._replace_mode,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypedCollection):
            return NotImplemented
        return (
            type(self) is type(other)
            and self._declared == other._declared
            and self._store.items() == other._store.items()
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        entries = dict(self._store.items())
        if type(self).value_type is None:
            return (
                f"{type(self).__name__}({entries!r},"
                f" value_type={types.type_name(self._declared)})"
            )
        return f"{type(self).__name__}({entries!r})"


def _resolve_declared(
    cls: type, value_type: Optional[types.DeclaredTypeLike]
) -> types.DeclaredType:
    class_type = getattr(cls, "value_type", None)
    if value_type is None:
        if class_type is None:
            raise TypeError(
                f"{cls.__name__} has no value_type; pass one when creating it"
            )
        return types.declared_type(class_type)
    declared = types.declared_type(value_type)
    if class_type is not None:
        fixed = types.declared_type(class_type)
        if fixed != declared:
            raise TypeError(
                f"{cls.__name__} only holds {types.type_name(fixed)} values,"
                f" not {types.type_name(declared)}"
            )
    return declared


def _check_key(key: object) -> None:
    if not types.is_key(key):
        raise TypeError(
            f"collection keys must be int or str, not {type(key).__name__}"
        )


def _entries_of(items: "Items[_V]") -> Iterable[Tuple[Any, _V]]:
    if isinstance(items, TypedCollection):
        return items.items()
    if isinstance(items, Mapping):
        return items.items()
    if types.is_nonstringy_sequence(items):
        return enumerate(items)
    raise TypeError(
        f"cannot build a collection from {type(items).__name__};"
        " pass a mapping or a sequence of values"
    )
