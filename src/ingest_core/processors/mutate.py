"""Field-level processors: set, append, remove, rename, string conversion,
gsub and convert.

Each processor comes with a factory that reads its configuration with the
``config.read_*`` helpers.  ``field`` options of set / append / remove are
templates, so ``"field": "{{target}}"`` writes to the field named by the
document's ``target`` value.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, Callable, Dict, Optional

import regex

from ..casters import BUILTIN_CASTERS, CONVERT_TYPES
from ..config import read_choice, read_object, read_string_property
from ..core import AbstractProcessorFactory, Processor
from ..document import IngestDocument
from ..errors import ConversionError, FieldAlreadyExists, FieldNotFound, InvalidConfigValue, TypeMismatch
from ..template import DEFAULT_TEMPLATE_SERVICE, Template, TemplateService
from ..value_source import ValueSource


class _TemplatingFactory(AbstractProcessorFactory):
    def __init__(self, templates: Optional[TemplateService] = None) -> None:
        self.templates = templates or DEFAULT_TEMPLATE_SERVICE


# ─────────────────────────────────────────────────────────────────────────────
# set: write a value at a field
# ─────────────────────────────────────────────────────────────────────────────


class SetProcessor(Processor):
    """``set`` — write a value, replacing whatever is at the field.

    Schema::

        {"set": {"field": "<templated path>", "value": <value with {{…}}>}}
    """

    type = "set"

    def __init__(self, tag: Optional[str], field: Template, value: ValueSource) -> None:
        super().__init__(tag)
        self.field = field
        self.value = value

    def apply(self, document: IngestDocument) -> IngestDocument:
        document.set_field_value(self.field, self.value)
        return document


class SetProcessorFactory(_TemplatingFactory):
    def do_create(self, tag: Optional[str], config: Dict[str, Any]) -> SetProcessor:
        field = read_string_property(config, "field")
        value = read_object(config, "value")
        return SetProcessor(tag, self.templates.compile(field), ValueSource.wrap(value, self.templates))


# ─────────────────────────────────────────────────────────────────────────────
# append: add to a list field
# ─────────────────────────────────────────────────────────────────────────────


class AppendProcessor(Processor):
    """``append`` — append one value, or every element of a list value.

    Schema::

        {"append": {"field": "<templated path>", "value": <value or list>}}

    A scalar field becomes a list first; a missing field becomes a new list.
    """

    type = "append"

    def __init__(self, tag: Optional[str], field: Template, value: ValueSource) -> None:
        super().__init__(tag)
        self.field = field
        self.value = value

    def apply(self, document: IngestDocument) -> IngestDocument:
        document.append_field_value(self.field, self.value)
        return document


class AppendProcessorFactory(_TemplatingFactory):
    def do_create(self, tag: Optional[str], config: Dict[str, Any]) -> AppendProcessor:
        field = read_string_property(config, "field")
        value = read_object(config, "value")
        return AppendProcessor(tag, self.templates.compile(field), ValueSource.wrap(value, self.templates))


# ─────────────────────────────────────────────────────────────────────────────
# remove
# ─────────────────────────────────────────────────────────────────────────────


class RemoveProcessor(Processor):
    """``remove`` — delete a field; a missing field is an error."""

    type = "remove"

    def __init__(self, tag: Optional[str], field: Template) -> None:
        super().__init__(tag)
        self.field = field

    def apply(self, document: IngestDocument) -> IngestDocument:
        document.remove_field(self.field)
        return document


class RemoveProcessorFactory(_TemplatingFactory):
    def do_create(self, tag: Optional[str], config: Dict[str, Any]) -> RemoveProcessor:
        return RemoveProcessor(tag, self.templates.compile(read_string_property(config, "field")))


# ─────────────────────────────────────────────────────────────────────────────
# rename
# ─────────────────────────────────────────────────────────────────────────────


class RenameProcessor(Processor):
    """``rename`` — move a field's value to a new path.

    Schema::

        {"rename": {"field": "old.path", "to": "new.path"}}

    The source must exist and the target must not.  The target may not be
    the source itself or a path nested under it.
    """

    type = "rename"

    def __init__(self, tag: Optional[str], field: str, to: str) -> None:
        super().__init__(tag)
        self.field = field
        self.to = to

    def apply(self, document: IngestDocument) -> IngestDocument:
        if not document.has_field(self.field):
            raise FieldNotFound(f"field [{self.field}] doesn't exist", self.field)
        if self.to.startswith(self.field + "."):
            raise FieldAlreadyExists(f"field [{self.to}] is nested under [{self.field}]", self.to)
        if document.has_field(self.to):
            raise FieldAlreadyExists(f"field [{self.to}] already exists", self.to)

        value = document.get_field_value(self.field)
        document.set_field_value(self.to, value)
        try:
            document.remove_field(self.field)
        except Exception:
            # rename must not leave the value in both places
            document.remove_field(self.to)
            raise
        return document


class RenameProcessorFactory(AbstractProcessorFactory):
    def do_create(self, tag: Optional[str], config: Dict[str, Any]) -> RenameProcessor:
        field = read_string_property(config, "field")
        to = read_string_property(config, "to")
        if to == field or to.startswith(field + "."):
            raise InvalidConfigValue(f"cannot rename field [{field}] to itself or to a path under it [{to}]", "to")
        return RenameProcessor(tag, field, to)


# ─────────────────────────────────────────────────────────────────────────────
# uppercase / lowercase / trim
# ─────────────────────────────────────────────────────────────────────────────


class AbstractStringProcessor(Processor):
    """Replace a string field with ``process(value)``.

    A ``None`` or non-string value fails with ``TypeMismatch``.
    """

    def __init__(self, tag: Optional[str], field: str) -> None:
        super().__init__(tag)
        self.field = field

    def apply(self, document: IngestDocument) -> IngestDocument:
        value = document.get_field_value(self.field, str)
        if value is None:
            raise TypeMismatch(f"field [{self.field}] is null, cannot process it.", self.field)
        document.set_field_value(self.field, self.process(value))
        return document

    @abstractmethod
    def process(self, value: str) -> str: ...


class UppercaseProcessor(AbstractStringProcessor):
    type = "uppercase"

    def process(self, value: str) -> str:
        return value.upper()


class LowercaseProcessor(AbstractStringProcessor):
    type = "lowercase"

    def process(self, value: str) -> str:
        return value.lower()


class TrimProcessor(AbstractStringProcessor):
    """Strip leading and trailing whitespace."""

    type = "trim"

    def process(self, value: str) -> str:
        return value.strip()


class StringProcessorFactory(AbstractProcessorFactory):
    """Shared factory for the single-``field`` string processors.

    ::

        StringProcessorFactory(UppercaseProcessor).create({"field": "name"})
    """

    def __init__(self, processor_cls: Callable[..., AbstractStringProcessor]) -> None:
        self.processor_cls = processor_cls

    def do_create(self, tag: Optional[str], config: Dict[str, Any]) -> AbstractStringProcessor:
        return self.processor_cls(tag, read_string_property(config, "field"))


# ─────────────────────────────────────────────────────────────────────────────
# gsub: regex replace
# ─────────────────────────────────────────────────────────────────────────────


class GsubProcessor(Processor):
    """``gsub`` — replace every match of a regular expression.

    Schema::

        {"gsub": {"field": "path", "pattern": "\\\\.", "replacement": "-"}}

    The pattern is compiled once at factory time.  Matching runs under a
    timeout (``regex`` module) so a pathological pattern cannot stall a
    pipeline.
    """

    type = "gsub"

    def __init__(self, tag: Optional[str], field: str, pattern: Any, replacement: str, timeout: float) -> None:
        super().__init__(tag)
        self.field = field
        self.pattern = pattern
        self.replacement = replacement
        self.timeout = timeout

    def apply(self, document: IngestDocument) -> IngestDocument:
        value = document.get_field_value(self.field, str)
        if value is None:
            raise TypeMismatch(f"field [{self.field}] is null, cannot match pattern.", self.field)
        try:
            replaced = self.pattern.sub(self.replacement, value, timeout=self.timeout)
        except TimeoutError:
            raise TimeoutError(f"gsub on field [{self.field}] exceeded timeout of {self.timeout}s")
        document.set_field_value(self.field, replaced)
        return document


class GsubProcessorFactory(AbstractProcessorFactory):
    def __init__(self, timeout: float = 2.0) -> None:
        self.timeout = timeout

    def do_create(self, tag: Optional[str], config: Dict[str, Any]) -> GsubProcessor:
        field = read_string_property(config, "field")
        pattern = read_string_property(config, "pattern")
        replacement = read_string_property(config, "replacement")
        try:
            compiled = regex.compile(pattern)
        except regex.error as e:
            raise InvalidConfigValue(f"invalid regex pattern [{pattern}]: {e}", "pattern") from e
        return GsubProcessor(tag, field, compiled, replacement, self.timeout)


# ─────────────────────────────────────────────────────────────────────────────
# convert: change a field's type
# ─────────────────────────────────────────────────────────────────────────────


class ConvertProcessor(Processor):
    """``convert`` — cast a field (or each element of a list field).

    Schema::

        {"convert": {"field": "count", "type": "integer", "target_field": "n"}}

    ``type`` is one of ``integer``, ``float``, ``boolean``, ``string``.
    ``target_field`` defaults to ``field``.
    """

    type = "convert"

    def __init__(self, tag: Optional[str], field: str, target_field: str, convert_type: str) -> None:
        super().__init__(tag)
        self.field = field
        self.target_field = target_field
        self.convert_type = convert_type
        self._caster = BUILTIN_CASTERS[CONVERT_TYPES[convert_type]]

    def _convert(self, value: Any) -> Any:
        try:
            return self._caster(value)
        except (TypeError, ValueError) as e:
            raise ConversionError(f"unable to convert [{value}] to {self.convert_type}") from e

    def apply(self, document: IngestDocument) -> IngestDocument:
        value = document.get_field_value(self.field)
        if value is None:
            raise TypeMismatch(f"field [{self.field}] is null, cannot be converted to type [{self.convert_type}]", self.field)
        if isinstance(value, list):
            converted: Any = [self._convert(v) for v in value]
        else:
            converted = self._convert(value)
        document.set_field_value(self.target_field, converted)
        return document


class ConvertProcessorFactory(AbstractProcessorFactory):
    def do_create(self, tag: Optional[str], config: Dict[str, Any]) -> ConvertProcessor:
        field = read_string_property(config, "field")
        convert_type = read_choice(config, "type", CONVERT_TYPES)
        target_field = read_string_property(config, "target_field", field)
        return ConvertProcessor(tag, field, target_field, convert_type)
