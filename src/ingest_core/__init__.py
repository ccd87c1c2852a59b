from .casters import BUILTIN_CASTERS, CONVERT_TYPES
from .core import AbstractProcessorFactory, Pipeline, Processor, ProcessorFactory, TAG_KEY
from .document import IngestDocument, MetaData
from .errors import (
    ConfigError,
    ConversionError,
    FieldAlreadyExists,
    FieldNotFound,
    IndexOutOfBounds,
    IngestError,
    InvalidConfigType,
    InvalidConfigValue,
    InvalidIndex,
    InvalidPath,
    MissingConfig,
    NotTraversable,
    PathError,
    PipelineLoadError,
    ProcessorError,
    TypeMismatch,
    UnexpectedConfig,
)
from .factory import PipelineFactory, ProcessorRegistry, build_default_registry
from .loader import load_definition, load_pipeline
from .log import configure_logging, get_logger
from .path import INGEST_KEY, SOURCE_KEY, FieldPath, Root
from .template import Template, TemplateService, has_placeholder
from .value_source import ListValue, MapValue, ObjectValue, TemplatedValue, ValueSource
from .values import ValueKind, cast, kind_of

__all__ = [
    # document model
    "IngestDocument",
    "MetaData",
    "FieldPath",
    "Root",
    "INGEST_KEY",
    "SOURCE_KEY",
    "ValueKind",
    "cast",
    "kind_of",
    # templates
    "Template",
    "TemplateService",
    "has_placeholder",
    "BUILTIN_CASTERS",
    "CONVERT_TYPES",
    "ValueSource",
    "ObjectValue",
    "TemplatedValue",
    "MapValue",
    "ListValue",
    # processing
    "Processor",
    "ProcessorFactory",
    "AbstractProcessorFactory",
    "Pipeline",
    "TAG_KEY",
    "ProcessorRegistry",
    "PipelineFactory",
    "build_default_registry",
    "load_definition",
    "load_pipeline",
    # logging
    "configure_logging",
    "get_logger",
    # errors
    "IngestError",
    "PathError",
    "InvalidPath",
    "FieldNotFound",
    "InvalidIndex",
    "IndexOutOfBounds",
    "NotTraversable",
    "TypeMismatch",
    "ConfigError",
    "MissingConfig",
    "InvalidConfigType",
    "InvalidConfigValue",
    "UnexpectedConfig",
    "ProcessorError",
    "FieldAlreadyExists",
    "ConversionError",
    "PipelineLoadError",
]
