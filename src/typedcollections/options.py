"""Enums and other types used as options across typed collections."""

import enum
from typing import Union

from typing_extensions import Literal


class IterationMode(enum.Enum):
    """How iterating over a collection behaves when it is mutated mid-loop.

    Also accepts the string values ``"snapshot"`` and ``"live"``.
    """

    SNAPSHOT = "snapshot"
    """Iterate over a copy of the values taken when the loop starts.

    Mutations made while iterating are not seen by the loop.
    """

    LIVE = "live"
    """Iterate using the collection's own cursor.

    The cursor is resynchronized after every mutation, so entries removed
    while iterating are not visited and entries appended are. All live loops
    over one collection share the same cursor.
    """


IterationModeStr = Union[IterationMode, Literal["snapshot", "live"]]
"""An iteration mode, or the string value of one."""


class ReplaceMode(enum.Enum):
    """How :meth:`TypedCollection.replace_all` handles a wrongly-typed item.

    Also accepts the string values ``"atomic"`` and ``"incremental"``.
    """

    ATOMIC = "atomic"
    """Every item is checked before anything is cleared.

    A single bad item raises and leaves the collection exactly as it was.
    """

    INCREMENTAL = "incremental"
    """The collection is cleared, then items are inserted one at a time.

    A bad item raises partway through, leaving only the items before it.
    """


ReplaceModeStr = Union[ReplaceMode, Literal["atomic", "incremental"]]
"""A replace mode, or the string value of one."""
