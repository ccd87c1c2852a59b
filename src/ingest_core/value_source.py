"""Value sources — configuration values resolved against a document.

A processor option such as ``"value": "{{user.name}}"`` cannot be resolved at
factory time; it is wrapped into a ``ValueSource`` once and resolved against
each document's template model when the processor runs.

Exports
-------
ValueSource
    The interface: ``resolve(model) → value``, plus ``ValueSource.wrap``.

ObjectValue
    Literal.  Containers are deep-copied on every resolve.

TemplatedValue
    A string with ``{{…}}`` placeholders.

MapValue, ListValue
    Containers whose members are themselves value sources, so placeholders
    nested inside a map or list are rendered too.
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional

from .template import DEFAULT_TEMPLATE_SERVICE, Template, TemplateService, has_placeholder


class ValueSource(ABC):
    """Produce a concrete value from a template model."""

    @abstractmethod
    def resolve(self, model: Mapping[str, Any]) -> Any:
        """Return a value that shares no container with *model* or with this source."""

    @staticmethod
    def wrap(value: Any, templates: Optional[TemplateService] = None) -> "ValueSource":
        """Build the value-source tree for a raw configuration value.

        ::

            wrap({"a": "{{x}}", "b": 1})  → MapValue({"a": TemplatedValue, "b": ObjectValue})
            wrap(["x", 2])                → ListValue([ObjectValue, ObjectValue])
            wrap("{{x}}")                 → TemplatedValue
            wrap(5)                       → ObjectValue
        """
        templates = templates or DEFAULT_TEMPLATE_SERVICE
        if isinstance(value, Mapping):
            return MapValue({k: ValueSource.wrap(v, templates) for k, v in value.items()})
        if isinstance(value, (list, tuple)):
            return ListValue([ValueSource.wrap(v, templates) for v in value])
        if has_placeholder(value):
            return TemplatedValue(templates.compile(value))
        return ObjectValue(value)


class ObjectValue(ValueSource):
    """A literal configuration value; the model is ignored."""

    def __init__(self, value: Any) -> None:
        self.value = value

    def resolve(self, model: Mapping[str, Any]) -> Any:
        return copy.deepcopy(self.value)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ObjectValue) and other.value == self.value

    def __repr__(self) -> str:
        return f"ObjectValue({self.value!r})"


class TemplatedValue(ValueSource):
    """A templated string.

    A template that is exactly one placeholder yields the referenced value
    with its native type (``"{{tags}}"`` → list); anything else renders text.
    """

    def __init__(self, template: Template) -> None:
        self.template = template

    def resolve(self, model: Mapping[str, Any]) -> Any:
        return copy.deepcopy(self.template.evaluate(model))

    def __eq__(self, other: object) -> bool:
        return isinstance(other, TemplatedValue) and other.template == self.template

    def __repr__(self) -> str:
        return f"TemplatedValue({self.template.source!r})"


class MapValue(ValueSource):
    def __init__(self, entries: Mapping[str, ValueSource]) -> None:
        self.entries = dict(entries)

    def resolve(self, model: Mapping[str, Any]) -> Any:
        return {k: v.resolve(model) for k, v in self.entries.items()}

    def __eq__(self, other: object) -> bool:
        return isinstance(other, MapValue) and other.entries == self.entries

    def __repr__(self) -> str:
        return f"MapValue({self.entries!r})"


class ListValue(ValueSource):
    def __init__(self, items: List[ValueSource]) -> None:
        self.items = list(items)

    def resolve(self, model: Mapping[str, Any]) -> Any:
        return [v.resolve(model) for v in self.items]

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ListValue) and other.items == self.items

    def __repr__(self) -> str:
        return f"ListValue({self.items!r})"
