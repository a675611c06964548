"""The keyed backing store of a typed collection."""

from typing import Dict, Generic, List, Optional, Tuple, TypeVar, Union

import attrs

from .types import Key

_V = TypeVar("_V")
_T = TypeVar("_T")


@attrs.define(eq=False)
class OrderedKeyedStore(Generic[_V]):
    """A mapping from key to value, paired with a positional index of its keys.

    ``_keys`` always holds exactly the keys of ``_entries``, in the order the
    entries exist: overwriting a key keeps its position, and new keys go at
    the end. The store does no type checking of its own.
    """

    _entries: Dict[Key, _V] = attrs.field(factory=dict, init=False)
    _keys: List[Key] = attrs.field(factory=list, init=False)
    _max_int: Optional[int] = attrs.field(default=None, init=False)
    """The highest integer key present, or None if there are none."""

    def set(self, key: Key, value: _V) -> bool:
        """Writes an entry. Returns True if the key is new."""
        is_new = key not in self._entries
        self._entries[key] = value
        if is_new:
            self._keys.append(key)
            if isinstance(key, int) and (self._max_int is None or key > self._max_int):
                self._max_int = key
        return is_new

    def next_key(self) -> int:
        """The key :meth:`append` will use next."""
        return 0 if self._max_int is None else self._max_int + 1

    def append(self, value: _V) -> int:
        """Adds a value under the next integer key and returns that key."""
        key = self.next_key()
        self.set(key, value)
        return key

    def remove(self, key: Key) -> bool:
        """Removes an entry. Returns False (and does nothing) if it is absent."""
        if key not in self._entries:
            return False
        del self._entries[key]
        self._keys.remove(key)
        if key == self._max_int:
            self._max_int = max(
                (k for k in self._keys if isinstance(k, int)), default=None
            )
        return True

    def clear(self) -> None:
        self._entries.clear()
        self._keys.clear()
        self._max_int = None

    def get(self, key: Key, default: Union[_V, _T, None] = None) -> Union[_V, _T, None]:
        return self._entries.get(key, default)

    def __getitem__(self, key: Key) -> _V:
        return self._entries[key]

    def index_of(self, key: Key) -> Optional[int]:
        """The position of ``key`` in key order, or None if it is absent."""
        if key not in self._entries:
            return None
        return self._keys.index(key)

    def key_at(self, position: int) -> Key:
        """The key at ``position``. Raises IndexError when out of range."""
        if position < 0:
            raise IndexError(f"key position {position} is negative")
        return self._keys[position]

    def keys(self) -> List[Key]:
        return list(self._keys)

    def values(self) -> List[_V]:
        return list(self._entries.values())

    def items(self) -> List[Tuple[Key, _V]]:
        return list(self._entries.items())

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
