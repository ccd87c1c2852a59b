"""Load pipeline definitions from YAML (or JSON) files.

::

    # pipelines/web-logs.yaml
    description: normalise web access logs
    processors:
      - lowercase: {field: method}
      - geoip: {source_field: client_ip}

    pipeline = load_pipeline("pipelines/web-logs.yaml")
    pipeline.id   # "web-logs"
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .core import Pipeline
from .errors import PipelineLoadError
from .factory import PipelineFactory, ProcessorRegistry, build_default_registry


def load_definition(path: os.PathLike) -> Dict[str, Any]:
    """Read a pipeline definition file into a mapping."""
    path = Path(path)
    if not path.is_file():
        raise PipelineLoadError(f"Pipeline file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise PipelineLoadError(f"Failed to parse pipeline file: {path}") from e

    if not isinstance(data, dict):
        raise PipelineLoadError(f"Top-level pipeline definition must be a mapping: {path}")

    return data


def load_pipeline(
        path: os.PathLike,
        registry: Optional[ProcessorRegistry] = None,
        *,
        pipeline_id: Optional[str] = None,
) -> Pipeline:
    """Load and build a pipeline.  The id defaults to the file stem."""
    path = Path(path)
    definition = load_definition(path)
    factory = PipelineFactory(registry or build_default_registry())
    return factory.create(pipeline_id or path.stem, definition)
