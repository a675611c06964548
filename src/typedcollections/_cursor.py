"""The iteration cursor of a typed collection.

A collection keeps one cursor, a position into the key order of its store.
Whenever the store changes, the collection tells the cursor, which moves so
that it keeps pointing at the same logical entry where it can:

- After a set, the cursor follows the key it was on. A set never removes a
  key, so in practice the position only changes if nothing was current.
- After removing the entry under the cursor, the cursor lands on the entry
  that followed it, or restarts at 0 if the removed entry was the last one.
- After removing any other entry, the cursor follows the key it was on, and
  restarts at 0 if it was not on any key.
"""

import enum
from typing import Generic, Optional, TypeVar

import attrs

from . import _store
from .types import Key

_V = TypeVar("_V")


class Resync(enum.Enum):
    """What a mutation did to the cursor, beyond following its key."""

    LANDED = "landed"
    """The current entry was removed; the cursor is on the entry after it."""

    RESTARTED = "restarted"
    """The cursor lost its place and went back to position 0."""


@attrs.define(eq=False)
class Cursor(Generic[_V]):
    """A forward-only, restartable position in a store's key order."""

    _backing: _store.OrderedKeyedStore[_V]
    position: int = 0
    _resync: Optional[Resync] = attrs.field(default=None, init=False)

    # Movement

    def valid(self) -> bool:
        """True if the cursor is on an entry that exists."""
        if not 0 <= self.position < len(self._backing):
            return False
        return self._backing.key_at(self.position) in self._backing

    def current_key(self) -> Key:
        if not self.valid():
            raise IndexError(f"cursor position {self.position} is not on an entry")
        return self._backing.key_at(self.position)

    def current(self) -> _V:
        return self._backing[self.current_key()]

    def advance(self) -> None:
        # Running past the end is fine; the cursor just stops being valid.
        self.position += 1
        self._resync = None

    def restart(self) -> None:
        self.position = 0
        self._resync = None

    def take_resync(self) -> Optional[Resync]:
        """Returns and clears what the last mutations did to the cursor."""
        resync, self._resync = self._resync, None
        return resync

    # Resynchronization

    def anchor(self) -> Optional[Key]:
        """The key the cursor is on, or None if it is past the end."""
        if 0 <= self.position < len(self._backing):
            return self._backing.key_at(self.position)
        return None

    def at_last(self) -> bool:
        return self.position == len(self._backing) - 1

    def resync_set(self, anchor: Optional[Key]) -> None:
        """Called after a set, with the :meth:`anchor` from before it."""
        if anchor is not None:
            self._follow(anchor)

    def resync_removed(
        self, removed: Key, anchor: Optional[Key], was_at_last: bool
    ) -> None:
        """Called after ``removed`` has been deleted from the store.

        ``anchor`` and ``was_at_last`` are the values of :meth:`anchor` and
        :meth:`at_last` from before the removal.
        """
        if anchor is None:
            self.lose_place()
        elif _same_key(anchor, removed):
            if was_at_last:
                self.lose_place()
            else:
                # The following entries shifted down by one, so the same
                # position now holds the entry after the removed one.
                self._resync = Resync.LANDED
        else:
            self._follow(anchor)

    def resync_replaced(self, anchor: Optional[Key]) -> None:
        """Called after the whole store was cleared and refilled."""
        if anchor is None:
            self.lose_place()
        else:
            self._follow(anchor)

    def lose_place(self) -> None:
        self.position = 0
        self._resync = Resync.RESTARTED

    def _follow(self, key: Key) -> None:
        position = self._backing.index_of(key)
        if position is None:
            self.lose_place()
        else:
            self.position = position


def _same_key(a: Key, b: Key) -> bool:
    return type(a) is type(b) and a == b
