"""Built-in type casters shared by templates and the ``convert`` processor.

Templates use them as a placeholder prefix (``{{int:age}}``); the ``convert``
processor selects one by its configured ``type``.

Exports
-------
BUILTIN_CASTERS
    Mapping of caster name to callable: ``int``, ``float``, ``bool``, ``str``.

CONVERT_TYPES
    Mapping of ``convert`` processor type names to caster names.
"""

from __future__ import annotations

from typing import Any, Callable


def _to_bool(x: Any) -> bool:
    if isinstance(x, bool):
        return x
    if isinstance(x, str):
        lowered = x.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
        return bool(int(lowered))
    if isinstance(x, (int, float)):
        return bool(x)
    raise ValueError(f"[{x!r}] is not a boolean value, cannot convert to boolean")


def _to_int(x: Any) -> int:
    if isinstance(x, str):
        return int(x.strip())
    return int(x)


BUILTIN_CASTERS: dict[str, Callable[[Any], Any]] = {
    "int": _to_int,
    "float": lambda x: float(x),
    "bool": _to_bool,
    "str": lambda x: str(x),
}

CONVERT_TYPES: dict[str, str] = {
    "integer": "int",
    "float": "float",
    "boolean": "bool",
    "string": "str",
}
