"""Registry and pipeline factory — the single place where processors are wired.

``build_default_registry`` is the recommended entry point for users who want
every built-in processor available without registering each by hand.

Customisation points:

* **geoip_databases** – database file name → ``GeoIpDatabase``.
* **templates**       – ``TemplateService`` used to compile ``{{…}}`` options.
* **gsub_timeout**    – per-match regex timeout in seconds (default 2.0).
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from .config import read_list_property, read_optional_string_property
from .core import Pipeline, Processor, ProcessorFactory
from .errors import InvalidConfigType, InvalidConfigValue, UnexpectedConfig
from .log import get_logger
from .processors.geoip import GeoIpDatabase, GeoIpProcessorFactory
from .processors.mutate import (
    AppendProcessorFactory,
    ConvertProcessorFactory,
    GsubProcessorFactory,
    LowercaseProcessor,
    RemoveProcessorFactory,
    RenameProcessorFactory,
    SetProcessorFactory,
    StringProcessorFactory,
    TrimProcessor,
    UppercaseProcessor,
)
from .template import TemplateService
from .values import type_name

logger = get_logger(__name__)


class ProcessorRegistry:
    """Processor type name → ``ProcessorFactory``."""

    def __init__(self) -> None:
        self._factories: Dict[str, ProcessorFactory] = {}

    def register(self, processor_type: str, factory: ProcessorFactory) -> None:
        if processor_type in self._factories:
            raise ValueError(f"Processor type [{processor_type}] is already registered")
        self._factories[processor_type] = factory

    def get(self, processor_type: str) -> ProcessorFactory:
        try:
            return self._factories[processor_type]
        except KeyError:
            raise InvalidConfigValue(
                f"No processor type exists with name [{processor_type}]. "
                f"valid values are [{', '.join(self.types())}]",
                processor_type,
            ) from None

    def types(self) -> List[str]:
        return sorted(self._factories)

    def create(self, processor_type: str, config: Mapping[str, Any]) -> Processor:
        return self.get(processor_type).create(config)


class PipelineFactory:
    """Build a ``Pipeline`` from a definition map.

    Schema::

        {"description": "optional text",
         "processors": [{"<type>": {<processor config>}}, ...]}
    """

    def __init__(self, registry: ProcessorRegistry) -> None:
        self.registry = registry

    def create(self, pipeline_id: str, config: Mapping[str, Any]) -> Pipeline:
        remaining: Dict[str, Any] = dict(config)
        description = read_optional_string_property(remaining, "description")
        entries = read_list_property(remaining, "processors")
        if remaining:
            raise UnexpectedConfig(
                f"pipeline [{pipeline_id}] doesn't support one or more provided configuration parameters "
                f"[{', '.join(sorted(remaining))}]",
                sorted(remaining)[0],
            )

        processors: List[Processor] = []
        for entry in entries:
            if not isinstance(entry, Mapping) or len(entry) != 1:
                raise InvalidConfigType(
                    f"processor definition must be a map with exactly one processor type, "
                    f"but was [{type_name(entry)}]",
                    "processors",
                )
            (processor_type, processor_config), = entry.items()
            if processor_config is None:
                processor_config = {}
            if not isinstance(processor_config, Mapping):
                raise InvalidConfigType(
                    f"property [{processor_type}] isn't a map, but of type [{type_name(processor_config)}]",
                    processor_type,
                )
            processors.append(self.registry.create(processor_type, processor_config))

        logger.debug("created pipeline [%s] with %d processors", pipeline_id, len(processors))
        return Pipeline(pipeline_id, processors, description)


def build_default_registry(
        *,
        geoip_databases: Optional[Mapping[str, GeoIpDatabase]] = None,
        templates: Optional[TemplateService] = None,
        gsub_timeout: float = 2.0,
) -> ProcessorRegistry:
    """Assemble a registry with every built-in processor.

    What gets registered
    --------------------
    * ``set``, ``append``, ``remove`` — templated ``field``; set/append
      ``value`` may contain ``{{…}}``.
    * ``rename``
    * ``uppercase``, ``lowercase``, ``trim``
    * ``gsub`` — regex replace with *gsub_timeout*.
    * ``convert``
    * ``geoip`` — over *geoip_databases* (empty → every create fails with
      ``InvalidConfigValue``).

    Example::

        registry = build_default_registry()
        pipeline = PipelineFactory(registry).create(
            "p1", {"processors": [{"uppercase": {"field": "name"}}]},
        )
        pipeline.execute(document)
    """
    registry = ProcessorRegistry()
    registry.register("set", SetProcessorFactory(templates))
    registry.register("append", AppendProcessorFactory(templates))
    registry.register("remove", RemoveProcessorFactory(templates))
    registry.register("rename", RenameProcessorFactory())
    registry.register("uppercase", StringProcessorFactory(UppercaseProcessor))
    registry.register("lowercase", StringProcessorFactory(LowercaseProcessor))
    registry.register("trim", StringProcessorFactory(TrimProcessor))
    registry.register("gsub", GsubProcessorFactory(gsub_timeout))
    registry.register("convert", ConvertProcessorFactory())
    registry.register("geoip", GeoIpProcessorFactory(geoip_databases))
    return registry
