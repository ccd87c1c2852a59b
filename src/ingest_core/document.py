"""``IngestDocument`` — the mutable document a pipeline transforms.

A document owns two independent maps:

* ``source_and_metadata`` — the record body, with the system fields
  (``_index``, ``_type``, ``_id`` and optionally ``_routing``, ``_parent``,
  ``_timestamp``, ``_ttl``) merged in as ordinary top-level keys.
* ``ingest_metadata`` — pipeline-internal bookkeeping, seeded with the
  ``timestamp`` of construction.

Every field operation takes a dot-notation path (see ``path.FieldPath``)::

    doc.set_field_value("user.tags", ["a"])
    doc.append_field_value("user.tags", "b")     # ["a", "b"]
    doc.get_field_value("user.tags.1", str)      # "b"
    doc.remove_field("user.tags.0")              # ["b"]
    doc.get_field_value("_ingest.timestamp", str)

Write semantics
---------------
* Missing intermediate map keys are created as empty maps on
  ``set_field_value`` / ``append_field_value``; lists are never extended.
* ``append_field_value`` turns a scalar leaf into a one-element list first,
  then appends the value (or each element, if the value is a list).
* Containers are detached (deep-copied) on write, so nothing the caller
  holds aliases the document tree.

No operation rolls back: a failure leaves earlier writes applied.
"""

from __future__ import annotations

import copy
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .errors import InvalidPath, NotTraversable
from .path import INGEST_KEY, SOURCE_KEY, FieldPath, Root, parse_index, resolve_element
from .template import Template
from .value_source import ValueSource
from .values import Expected, cast, detach, type_name

TIMESTAMP = "timestamp"

PathLike = Union[str, Template]


class MetaData(Enum):
    """System fields merged into the document body at construction."""

    INDEX = "_index"
    TYPE = "_type"
    ID = "_id"
    ROUTING = "_routing"
    PARENT = "_parent"
    TIMESTAMP = "_timestamp"
    TTL = "_ttl"

    @property
    def field_name(self) -> str:
        return self.value


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


class IngestDocument:
    """A single record captured before it is stored.

    Args:
        index, doc_type, doc_id: required system fields.
        source: the record body; copied, never aliased.
        routing, parent, timestamp, ttl: optional system fields, omitted
            when ``None``.
    """

    def __init__(
            self,
            index: str,
            doc_type: str,
            doc_id: str,
            source: Mapping[str, Any],
            *,
            routing: Optional[str] = None,
            parent: Optional[str] = None,
            timestamp: Optional[str] = None,
            ttl: Optional[str] = None,
    ) -> None:
        for name, value in (("index", index), ("type", doc_type), ("id", doc_id)):
            if value is None:
                raise ValueError(f"{name} cannot be null")

        body: Dict[str, Any] = detach(dict(source))
        body[MetaData.INDEX.field_name] = index
        body[MetaData.TYPE.field_name] = doc_type
        body[MetaData.ID.field_name] = doc_id
        for field, value in (
                (MetaData.ROUTING, routing),
                (MetaData.PARENT, parent),
                (MetaData.TIMESTAMP, timestamp),
                (MetaData.TTL, ttl),
        ):
            if value is not None:
                body[field.field_name] = value

        self._source_and_metadata = body
        self._ingest_metadata: Dict[str, Any] = {TIMESTAMP: _now()}

    @classmethod
    def from_maps(
            cls,
            source_and_metadata: Dict[str, Any],
            ingest_metadata: Dict[str, Any],
    ) -> "IngestDocument":
        """Build a document over the given maps as-is (no system fields added,
        no timestamp generated).  Mostly useful for deterministic tests."""
        doc = cls.__new__(cls)
        doc._source_and_metadata = source_and_metadata
        doc._ingest_metadata = ingest_metadata
        return doc

    def copy(self) -> "IngestDocument":
        """Return an independent document with both maps deep-copied."""
        return IngestDocument.from_maps(
            copy.deepcopy(self._source_and_metadata),
            copy.deepcopy(self._ingest_metadata),
        )

    # -- accessors ----------------------------------------------------------

    @property
    def source_and_metadata(self) -> Dict[str, Any]:
        """The body map.  Mutate it through the field operations instead."""
        return self._source_and_metadata

    @property
    def ingest_metadata(self) -> Dict[str, Any]:
        return self._ingest_metadata

    def _root(self, field_path: FieldPath) -> Dict[str, Any]:
        if field_path.root is Root.INGEST:
            return self._ingest_metadata
        return self._source_and_metadata

    # -- read ---------------------------------------------------------------

    def get_field_value(self, path: str, expected_type: Expected = object) -> Any:
        """Return the value at *path*, checked against *expected_type*.

        Returns ``None`` only when the stored value is itself ``None``.

        Raises:
            InvalidPath, FieldNotFound, InvalidIndex, IndexOutOfBounds,
            NotTraversable, TypeMismatch
        """
        field_path = FieldPath(path)
        context: Any = self._root(field_path)
        for element in field_path.elements:
            context = resolve_element(element, path, context)
        return cast(path, context, expected_type)

    def has_field(self, path: str) -> bool:
        """True iff *path* leads to an existing key or in-range index.

        Never raises, not even for an invalid path.
        """
        try:
            field_path = FieldPath(path)
        except InvalidPath:
            return False

        context: Any = self._root(field_path)
        for element in field_path.parents:
            if isinstance(context, dict):
                if element not in context:
                    return False
                context = context[element]
            elif isinstance(context, list):
                index = _maybe_index(element, len(context))
                if index is None:
                    return False
                context = context[index]
            else:
                return False

        leaf = field_path.leaf
        if isinstance(context, dict):
            return leaf in context
        if isinstance(context, list):
            return _maybe_index(leaf, len(context)) is not None
        return False

    # -- write --------------------------------------------------------------

    def set_field_value(self, path: PathLike, value: Any) -> None:
        """Write *value* at *path*, replacing whatever is there.

        *path* may be a compiled ``Template`` and *value* a ``ValueSource``;
        both are then resolved against a snapshot of this document first.
        A list leaf must already exist; lists are never extended.
        """
        path, value = self._resolve_write_args(path, value)
        self._set(path, value, append=False)

    def append_field_value(self, path: PathLike, value: Any) -> None:
        """Append *value* (or every element of a list *value*) at *path*.

        A missing leaf becomes a new list; a scalar leaf becomes
        ``[scalar]`` before appending.
        """
        path, value = self._resolve_write_args(path, value)
        self._set(path, value, append=True)

    def _resolve_write_args(self, path: PathLike, value: Any) -> Tuple[str, Any]:
        if isinstance(path, Template) or isinstance(value, ValueSource):
            model = self.create_template_model()
            if isinstance(path, Template):
                path = path.render(model)
            if isinstance(value, ValueSource):
                value = value.resolve(model)
        return path, detach(value)

    def _set(self, path: str, value: Any, *, append: bool) -> None:
        field_path = FieldPath(path)
        context: Any = self._root(field_path)

        for element in field_path.parents:
            if isinstance(context, dict) and element not in context:
                context[element] = {}
            context = resolve_element(element, path, context)

        leaf = field_path.leaf
        if context is None:
            raise NotTraversable(f"cannot set [{leaf}] with null parent as part of path [{path}]", path)

        if isinstance(context, dict):
            if append:
                existing = context.get(leaf, _MISSING)
                if existing is _MISSING:
                    context[leaf] = _append_values([], value)
                else:
                    appended = _append_values(existing, value)
                    if appended is not existing:
                        context[leaf] = appended
            else:
                context[leaf] = value
        elif isinstance(context, list):
            index = parse_index(leaf, len(context), path)
            if append:
                existing = context[index]
                appended = _append_values(existing, value)
                if appended is not existing:
                    context[index] = appended
            else:
                context[index] = value
        else:
            raise NotTraversable(
                f"cannot set [{leaf}] with parent object of type [{type_name(context)}] as part of path [{path}]",
                path,
            )

    # -- remove -------------------------------------------------------------

    def remove_field(self, path: PathLike) -> None:
        """Remove the key or list element at *path*.

        Removing from a list shifts every later element down by one.

        Raises:
            InvalidPath, FieldNotFound, InvalidIndex, IndexOutOfBounds,
            NotTraversable
        """
        if isinstance(path, Template):
            path = self.render_template(path)

        field_path = FieldPath(path)
        context: Any = self._root(field_path)
        for element in field_path.parents:
            context = resolve_element(element, path, context)

        leaf = field_path.leaf
        if isinstance(context, dict):
            # raises FieldNotFound for a missing key
            resolve_element(leaf, path, context)
            del context[leaf]
        elif isinstance(context, list):
            del context[parse_index(leaf, len(context), path)]
        elif context is None:
            raise NotTraversable(f"cannot remove [{leaf}] from null as part of path [{path}]", path)
        else:
            raise NotTraversable(
                f"cannot remove [{leaf}] from object of type [{type_name(context)}] as part of path [{path}]",
                path,
            )

    # -- templates ----------------------------------------------------------

    def create_template_model(self) -> Dict[str, Any]:
        """Snapshot of the document for template evaluation.

        Contains every body entry at the top level, plus ``_source`` (the
        body) and ``_ingest`` (ingest metadata).  A body key named
        ``_ingest`` is shadowed here; reach it via ``_source._ingest``.
        The snapshot is a deep copy, so later writes cannot be observed
        through it.
        Opaque values stored in the document must therefore support
        ``copy.deepcopy``; one that does not (a lock, a socket) makes every
        templated write fail with ``TypeError``.
        """
        body = copy.deepcopy(self._source_and_metadata)
        model: Dict[str, Any] = dict(body)
        model[SOURCE_KEY] = body
        model[INGEST_KEY] = copy.deepcopy(self._ingest_metadata)
        return model

    def render_template(self, template: Template) -> str:
        return template.render(self.create_template_model())

    # -- metadata -----------------------------------------------------------

    def extract_metadata(self) -> Dict[MetaData, Optional[str]]:
        """Remove the system fields from the body and return them.

        One-time and destructive: a second call returns ``None`` for every
        field.
        """
        return {
            field: cast(field.field_name, self._source_and_metadata.pop(field.field_name, None), str)
            for field in MetaData
        }

    # -- dunder -------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IngestDocument):
            return NotImplemented
        return (
            self._source_and_metadata == other._source_and_metadata
            and self._ingest_metadata == other._ingest_metadata
        )

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return (
            f"IngestDocument(source_and_metadata={self._source_and_metadata!r}, "
            f"ingest_metadata={self._ingest_metadata!r})"
        )


_MISSING = object()


def _maybe_index(element: str, size: int) -> Optional[int]:
    try:
        return parse_index(element, size, element)
    except (ValueError, IndexError):
        return None


def _append_values(maybe_list: Any, value: Any) -> list:
    """Return *maybe_list* (or ``[maybe_list]`` for a scalar) with *value* appended."""
    target = maybe_list if isinstance(maybe_list, list) else [maybe_list]
    if isinstance(value, list):
        target.extend(value)
    else:
        target.append(value)
    return target
