"""Core abstractions: Processor, ProcessorFactory and Pipeline.

This module owns the processing *interfaces*.  Concrete processors live in
the ``processors`` sub-package; wiring them into a registry happens in
``factory``.

Execution flow (``Pipeline.execute`` entry point)::

    IngestDocument (one per inbound record)
      │
      ▼
    for processor in pipeline.processors:      ← strictly sequential
        processor.apply(document)               ← mutates the document in place
          │
          └─ failure → ProcessorError(type, tag) from the original error
      │
      ▼
    IngestDocument (handed to storage)

Processors and factories are built once and shared by every document, so
they must not keep per-document state.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Iterable, Mapping, Optional, Tuple

from .config import read_optional_string_property
from .document import IngestDocument
from .errors import ProcessorError, UnexpectedConfig
from .log import get_logger

logger = get_logger(__name__)

TAG_KEY = "tag"


# ─────────────────────────────────────────────────────────────────────────────
# Processor
# ─────────────────────────────────────────────────────────────────────────────


class Processor(ABC):
    """One configured transformation step.

    Class attributes (set in subclass)::

        type: str   – the name the processor is registered under
    """

    type: ClassVar[str]

    def __init__(self, tag: Optional[str] = None) -> None:
        self.tag = tag

    @abstractmethod
    def apply(self, document: IngestDocument) -> IngestDocument:
        """Transform *document* in place and return it."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(tag={self.tag!r})"


# ─────────────────────────────────────────────────────────────────────────────
# ProcessorFactory
# ─────────────────────────────────────────────────────────────────────────────


class ProcessorFactory(ABC):
    """Validate a configuration map and build one processor from it."""

    @abstractmethod
    def create(self, config: Mapping[str, Any]) -> Processor: ...


class AbstractProcessorFactory(ProcessorFactory):
    """Factory template that handles the shared ``tag`` key and strict
    unknown-key rejection.

    Subclasses implement ``do_create`` and consume their keys with the
    ``config.read_*`` helpers.  Anything still in the map afterwards raises
    ``UnexpectedConfig``.  The caller's mapping is never modified.
    """

    def create(self, config: Mapping[str, Any]) -> Processor:
        remaining: Dict[str, Any] = dict(config)
        tag = read_optional_string_property(remaining, TAG_KEY)
        processor = self.do_create(tag, remaining)
        if remaining:
            unknown = ", ".join(sorted(remaining))
            raise UnexpectedConfig(
                f"processor [{processor.type}] doesn't support one or more provided configuration parameters [{unknown}]",
                sorted(remaining)[0],
            )
        logger.debug("created processor %r", processor)
        return processor

    @abstractmethod
    def do_create(self, tag: Optional[str], config: Dict[str, Any]) -> Processor: ...


# ─────────────────────────────────────────────────────────────────────────────
# Pipeline
# ─────────────────────────────────────────────────────────────────────────────


class Pipeline:
    """An ordered, immutable sequence of processors.

    ``execute`` applies each processor to the same document in order; every
    processor sees the full effect of the ones before it.  A failure stops
    the run and is re-raised as ``ProcessorError`` naming the processor's
    type and tag; writes made before the failure stay applied.
    """

    def __init__(
            self,
            pipeline_id: str,
            processors: Iterable[Processor],
            description: Optional[str] = None,
    ) -> None:
        self.id = pipeline_id
        self.description = description
        self._processors: Tuple[Processor, ...] = tuple(processors)

    @property
    def processors(self) -> Tuple[Processor, ...]:
        return self._processors

    def execute(self, document: IngestDocument) -> IngestDocument:
        for processor in self._processors:
            logger.debug("pipeline [%s] applying %r", self.id, processor)
            try:
                document = processor.apply(document)
            except ProcessorError:
                raise
            except Exception as e:
                logger.warning(
                    "pipeline [%s] processor [%s] (tag=%s) failed: %s",
                    self.id, processor.type, processor.tag, e,
                )
                raise ProcessorError(processor.type, processor.tag, e) from e
        return document

    def __repr__(self) -> str:
        return f"Pipeline(id={self.id!r}, processors={list(self._processors)!r})"
