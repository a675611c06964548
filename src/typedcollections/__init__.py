"""Ordered collections restricted to a single, runtime-checked value type.

Types are defined in their own modules and then imported here for a single
unified namespace.
"""

# __init__ files, used strictly for re-exporting, are the exception to the
# "import modules only" style used in typedcollections.

from typing import Tuple, Union

from .collection import TypedCollection
from .errors import TypeMismatchError
from .options import IterationMode
from .options import ReplaceMode
from .scalars import BoolCollection
from .scalars import FloatCollection
from .scalars import IntCollection
from .scalars import StringCollection
from .serialization import Serializable
from .types import ValueKind

try:
    # This trips up mypy since it's a generated file:
    from . import _version  # type: ignore[attr-defined]

    __version__: str = _version.version
    __version_tuple__: Tuple[Union[int, str], ...] = _version.version_tuple
except ImportError:
    __version__ = "0.0.0.dev+invalid"
    __version_tuple__ = (0, 0, 0, "dev", "invalid")


__all__ = (
    "TypedCollection",
    "BoolCollection",
    "IntCollection",
    "FloatCollection",
    "StringCollection",
    "TypeMismatchError",
    "IterationMode",
    "ReplaceMode",
    "Serializable",
    "ValueKind",
)
