"""Logging setup.

Modules obtain their logger with::

    from .log import get_logger
    logger = get_logger(__name__)

The library never configures logging itself; applications call
``configure_logging`` once (or set up ``logging`` their own way).
"""

from __future__ import annotations

import logging
import sys

DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s | %(message)s"

logging.getLogger("ingest_core").addHandler(logging.NullHandler())


def configure_logging(level: int = logging.INFO, fmt: str = DEFAULT_FORMAT, stream=None) -> logging.Logger:
    """Attach one stream handler to the ``ingest_core`` logger.

    Calling it again only updates the level; no duplicate handler is added.
    """
    logger = logging.getLogger("ingest_core")
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(fmt))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
