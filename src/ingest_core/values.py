"""The JSON-like value model that documents are built from.

Values are plain Python data.  ``ValueKind`` is the closed set of tags a value
can carry; ``kind_of`` classifies a value and ``cast`` is the checked
down-cast used by every typed read.
"""

from __future__ import annotations

import copy
from enum import Enum
from typing import Any, Tuple, Type, Union

from .errors import TypeMismatch


class ValueKind(Enum):
    MAP = "map"
    LIST = "list"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    OPAQUE = "opaque"


Expected = Union[ValueKind, Type[Any], Tuple[Type[Any], ...]]


def kind_of(value: Any) -> ValueKind:
    """Return the tag of *value*.  ``bool`` is checked before numbers."""
    if value is None:
        return ValueKind.NULL
    if isinstance(value, dict):
        return ValueKind.MAP
    if isinstance(value, list):
        return ValueKind.LIST
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    return ValueKind.OPAQUE


def type_name(value: Any) -> str:
    """Runtime type name used in error messages (``str``, ``dict``, ``NoneType`` …)."""
    return type(value).__name__


def _expected_name(expected: Expected) -> str:
    if isinstance(expected, ValueKind):
        return expected.value
    if isinstance(expected, tuple):
        return ", ".join(t.__name__ for t in expected)
    return expected.__name__


def _matches(value: Any, expected: Expected) -> bool:
    if isinstance(expected, ValueKind):
        return kind_of(value) is expected
    types = expected if isinstance(expected, tuple) else (expected,)
    if isinstance(value, bool) and bool not in types and object not in types:
        return False
    return isinstance(value, types)


def cast(path: str, value: Any, expected: Expected) -> Any:
    """Return *value* if it is ``None`` or of type *expected*.

    *expected* is a Python type, a tuple of types or a ``ValueKind``.  A
    ``bool`` never satisfies ``int`` / ``float``.

    Raises:
        TypeMismatch: naming both the actual and the expected type.
    """
    if value is None or _matches(value, expected):
        return value
    raise TypeMismatch(
        f"field [{path}] of type [{type_name(value)}] cannot be cast to [{_expected_name(expected)}]",
        path,
    )


def tuples_to_lists(obj: Any) -> Any:
    """Recursively convert tuples to lists; the model has no tuple node."""
    if isinstance(obj, (tuple, list)):
        return [tuples_to_lists(x) for x in obj]
    if isinstance(obj, dict):
        return {k: tuples_to_lists(v) for k, v in obj.items()}
    return obj


def detach(value: Any) -> Any:
    """Return a copy of *value* that shares no container with the original.

    Scalars are returned as-is.  Opaque values inside a container are deep-copied
    along with it and must support ``copy.deepcopy``.
    """
    if isinstance(value, (dict, list, tuple)):
        return copy.deepcopy(tuples_to_lists(value))
    return value
