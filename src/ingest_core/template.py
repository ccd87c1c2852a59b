"""Template rendering — everything that touches ``{{…}}`` syntax.

Templates let processor configuration refer to live document values, e.g.
``"{{user.first}} {{user.last}}"`` or ``"{{_ingest.timestamp}}"``.  They are
compiled once at factory time and evaluated against a *template model*
(see ``IngestDocument.create_template_model``).

Exports
-------
TemplateService
    Compiles template strings and owns the expression dispatch
    (casters, JMESPath).

Template
    A compiled template: ``render`` → text, ``evaluate`` → native value.

has_placeholder
    True if a string contains a ``{{…}}`` placeholder.

Expression dispatch (inside ``{{…}}``)
--------------------------------------
1. **Caster**    ``{{int:age}}``        – resolve the inner expression, cast.
2. **JMESPath**  ``{{? items[0].id}}``  – query the whole model.
3. **Field**     ``{{user.name}}``      – dot path walked through the model,
   with the same errors as ``IngestDocument.get_field_value``.
"""

from __future__ import annotations

import json
from typing import Any, Callable, List, Mapping, Optional, Tuple

import jmespath
from jmespath import functions as _jp_funcs

from .casters import BUILTIN_CASTERS
from .errors import InvalidPath
from .path import SEPARATOR, resolve_element

OPEN = "{{"
CLOSE = "}}"

_TEXT = 0
_EXPR = 1


# ─────────────────────────────────────────────────────────────────────────────
# Built-in JMESPath functions
# ─────────────────────────────────────────────────────────────────────────────


class _BuiltinJMESFunctions(_jp_funcs.Functions):
    """Custom JMESPath functions for ``{{? …}}`` expressions."""

    @_jp_funcs.signature({"types": ["number"]}, {"types": ["number"]})
    def _func_add(self, a: float, b: float) -> float:
        return a + b

    @_jp_funcs.signature({"types": ["number"]}, {"types": ["number"]})
    def _func_subtract(self, a: float, b: float) -> float:
        return a - b


_BUILTIN_JMES_OPTIONS = jmespath.Options(custom_functions=_BuiltinJMESFunctions())


# ─────────────────────────────────────────────────────────────────────────────
# Parsing
# ─────────────────────────────────────────────────────────────────────────────


def has_placeholder(s: Any) -> bool:
    """Return True if *s* is a string with at least one closed ``{{…}}``."""
    if not isinstance(s, str):
        return False
    start = s.find(OPEN)
    return start != -1 and s.find(CLOSE, start + len(OPEN)) != -1


def _tokenize(source: str) -> Tuple[Tuple[int, str], ...]:
    """Split *source* into text and expression parts.

    An unclosed ``{{`` is kept as literal text.
    """
    parts: List[Tuple[int, str]] = []
    i = 0
    while i < len(source):
        start = source.find(OPEN, i)
        if start == -1:
            parts.append((_TEXT, source[i:]))
            break
        end = source.find(CLOSE, start + len(OPEN))
        if end == -1:
            parts.append((_TEXT, source[i:]))
            break
        if start > i:
            parts.append((_TEXT, source[i:start]))
        parts.append((_EXPR, source[start + len(OPEN):end].strip()))
        i = end + len(CLOSE)
    return tuple(parts)


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (Mapping, list, bool)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)


# ─────────────────────────────────────────────────────────────────────────────
# Template
# ─────────────────────────────────────────────────────────────────────────────


class Template:
    """A compiled template string.  Immutable; safe to share between threads."""

    __slots__ = ("source", "_parts", "_service")

    def __init__(self, source: str, service: "TemplateService") -> None:
        self.source = source
        self._parts = _tokenize(source)
        self._service = service

    @property
    def is_static(self) -> bool:
        """True when the template contains no placeholder at all."""
        return all(kind == _TEXT for kind, _ in self._parts)

    def render(self, model: Mapping[str, Any]) -> str:
        """Interpolate every placeholder and return the resulting text."""
        out: List[str] = []
        for kind, chunk in self._parts:
            if kind == _TEXT:
                out.append(chunk)
            else:
                out.append(_to_text(self._service.resolve_expression(chunk, model)))
        return "".join(out)

    def evaluate(self, model: Mapping[str, Any]) -> Any:
        """Like ``render``, but a template that is exactly one placeholder
        returns the referenced value with its native type."""
        if len(self._parts) == 1 and self._parts[0][0] == _EXPR:
            return self._service.resolve_expression(self._parts[0][1], model)
        return self.render(model)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Template) and other.source == self.source

    def __hash__(self) -> int:
        return hash(self.source)

    def __repr__(self) -> str:
        return f"Template({self.source!r})"


# ─────────────────────────────────────────────────────────────────────────────
# Service
# ─────────────────────────────────────────────────────────────────────────────


class TemplateService:
    """Compile templates and resolve placeholder expressions.

    Configuration
    -------------
    casters
        ``None``    → built-in casters (int, float, bool, str).
        ``Mapping`` → explicit ``{name: callable}`` (replaces built-ins;
                    an empty mapping disables casters).

    jmes_options
        Custom ``jmespath.Options``.  ``None`` → built-in ``add`` /
        ``subtract`` functions.
    """

    def __init__(
            self,
            *,
            casters: Optional[Mapping[str, Callable[[Any], Any]]] = None,
            jmes_options: Optional[jmespath.Options] = None,
    ) -> None:
        self._casters = dict(casters) if casters is not None else dict(BUILTIN_CASTERS)
        self._jp_options = jmes_options if jmes_options is not None else _BUILTIN_JMES_OPTIONS

    def compile(self, source: str) -> Template:
        return Template(source, self)

    def resolve_expression(self, expr: str, model: Mapping[str, Any]) -> Any:
        """Dispatch a single placeholder body against *model*."""
        expr = expr.strip()

        for prefix, fn in self._casters.items():
            tag = f"{prefix}:"
            if expr.startswith(tag):
                return fn(self.resolve_expression(expr[len(tag):], model))

        if expr.startswith("?"):
            return jmespath.search(expr[1:].strip(), model, options=self._jp_options)

        elements = [e for e in expr.split(SEPARATOR) if e]
        if not elements:
            raise InvalidPath(f"template expression [{expr}] is not valid", expr)
        context: Any = model
        for element in elements:
            context = resolve_element(element, expr, context)
        return context


DEFAULT_TEMPLATE_SERVICE = TemplateService()
