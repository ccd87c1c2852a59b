"""Dot-notation field paths.

Grammar::

    [<prefix>.]segment(.segment)*

* ``_ingest.`` — the path addresses the ingest metadata map.
* ``_source.`` — explicit alias for the document body.
* no prefix    — the document body.

Segments are opaque until resolved: against a map a segment is a key,
against a list it must be a base-10 integer index.

Examples::

    FieldPath("a.b.0")             → Root.SOURCE, ("a", "b", "0")
    FieldPath("_ingest.timestamp") → Root.INGEST, ("timestamp",)
    FieldPath("_source._ingest")   → Root.SOURCE, ("_ingest",)
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Tuple

from .errors import FieldNotFound, IndexOutOfBounds, InvalidIndex, InvalidPath, NotTraversable
from .values import type_name

INGEST_KEY = "_ingest"
SOURCE_KEY = "_source"
SEPARATOR = "."

_INDEX_RE = re.compile(r"-?[0-9]+")


class Root(Enum):
    SOURCE = "source"
    INGEST = "ingest"


class FieldPath:
    """A parsed path: which root map to start from and the segments to walk."""

    __slots__ = ("path", "root", "elements")

    def __init__(self, path: str) -> None:
        if not path:
            raise InvalidPath("path cannot be null nor empty", path)

        if path.startswith(INGEST_KEY + SEPARATOR):
            root = Root.INGEST
            rest = path[len(INGEST_KEY) + 1:]
        else:
            root = Root.SOURCE
            if path.startswith(SOURCE_KEY + SEPARATOR):
                rest = path[len(SOURCE_KEY) + 1:]
            else:
                rest = path

        elements = tuple(e for e in rest.split(SEPARATOR) if e)
        if not elements:
            raise InvalidPath(f"path [{path}] is not valid", path)

        self.path = path
        self.root = root
        self.elements: Tuple[str, ...] = elements

    @property
    def parents(self) -> Tuple[str, ...]:
        return self.elements[:-1]

    @property
    def leaf(self) -> str:
        return self.elements[-1]

    def __repr__(self) -> str:
        return f"FieldPath({self.path!r}, root={self.root.name}, elements={self.elements!r})"


def parse_index(element: str, size: int, path: str) -> int:
    """Parse *element* as an index into a list of length *size*.

    Raises:
        InvalidIndex:     *element* is not an integer.
        IndexOutOfBounds: the integer is outside ``[0, size)``.
    """
    if not _INDEX_RE.fullmatch(element):
        raise InvalidIndex(
            f"[{element}] is not an integer, cannot be used as an index as part of path [{path}]",
            path,
        )
    index = int(element)
    if index < 0 or index >= size:
        raise IndexOutOfBounds(
            f"[{index}] is out of bounds for array with length [{size}] as part of path [{path}]",
            path,
        )
    return index


def resolve_element(element: str, path: str, context: Any) -> Any:
    """Step from *context* into its child named by *element* (read semantics)."""
    if context is None:
        raise NotTraversable(f"cannot resolve [{element}] from null as part of path [{path}]", path)
    if isinstance(context, dict):
        if element in context:
            return context[element]
        raise FieldNotFound(f"field [{element}] not present as part of path [{path}]", path)
    if isinstance(context, list):
        return context[parse_index(element, len(context), path)]
    raise NotTraversable(
        f"cannot resolve [{element}] from object of type [{type_name(context)}] as part of path [{path}]",
        path,
    )
