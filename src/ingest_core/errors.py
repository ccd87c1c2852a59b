"""Exception hierarchy for document access, configuration and processing.

Every failure raised by this package derives from ``IngestError``.  Each
concrete kind also inherits from the closest builtin (``LookupError``,
``IndexError``, ``TypeError``, ``ValueError``) so plain builtin ``except``
clauses still catch it.

Exports
-------
Path / document access
    ``InvalidPath``, ``FieldNotFound``, ``InvalidIndex``,
    ``IndexOutOfBounds``, ``NotTraversable``, ``TypeMismatch``.

Factory-time configuration
    ``ConfigError`` and its subclasses ``MissingConfig``,
    ``InvalidConfigType``, ``InvalidConfigValue``, ``UnexpectedConfig``.

Runtime
    ``ProcessorError`` (wraps a processor failure with its type and tag),
    ``FieldAlreadyExists``, ``ConversionError``, ``PipelineLoadError``.
"""

from __future__ import annotations

from typing import Optional


class IngestError(Exception):
    """Base class for every error raised by ingest_core."""


# ─────────────────────────────────────────────────────────────────────────────
# Path resolution
# ─────────────────────────────────────────────────────────────────────────────


class PathError(IngestError):
    """A failure tied to a specific dot-notation path."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class InvalidPath(PathError, ValueError):
    """The path string is empty or has no segments."""


class FieldNotFound(PathError, LookupError):
    """A map key addressed by the path is absent."""


class InvalidIndex(PathError, ValueError):
    """A non-numeric segment was used against a list."""


class IndexOutOfBounds(PathError, IndexError):
    """A numeric segment is outside ``[0, len(list))``."""


class NotTraversable(PathError, TypeError):
    """Attempt to descend into, or write under, ``None`` or a scalar."""


class TypeMismatch(PathError, TypeError):
    """The resolved value is not of the type the caller asked for."""


# ─────────────────────────────────────────────────────────────────────────────
# Configuration
# ─────────────────────────────────────────────────────────────────────────────


class ConfigError(IngestError, ValueError):
    """Processor or pipeline configuration failed validation."""

    def __init__(self, message: str, property_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.property_name = property_name


class MissingConfig(ConfigError):
    pass


class InvalidConfigType(ConfigError):
    pass


class InvalidConfigValue(ConfigError):
    pass


class UnexpectedConfig(ConfigError):
    """Keys were left over after a factory consumed everything it knows."""


# ─────────────────────────────────────────────────────────────────────────────
# Runtime
# ─────────────────────────────────────────────────────────────────────────────


class ProcessorError(IngestError):
    """A processor failed while applied to a document.

    The original exception is available as ``__cause__``.
    """

    def __init__(self, processor_type: str, tag: Optional[str], cause: BaseException) -> None:
        label = processor_type if tag is None else f"{processor_type}:{tag}"
        super().__init__(f"processor [{label}] failed: {cause}")
        self.processor_type = processor_type
        self.tag = tag


class FieldAlreadyExists(PathError, ValueError):
    """A write that must not overwrite found its target occupied."""


class ConversionError(IngestError, ValueError):
    """A value could not be converted to the requested type."""


class PipelineLoadError(IngestError):
    """A pipeline definition file could not be read or parsed."""
