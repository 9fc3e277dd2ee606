"""
Logging setup — structlog events routed through the stdlib "flow" logger.

Library modules obtain their logger from `get_logger()` and emit dotted
event names (flet.short_circuit, call.captured, …). The events go to
logging.getLogger("flow"), which carries a NullHandler: until the host
application configures logging, or calls flow.configure(), nothing is
written anywhere.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Any, Optional

import structlog

LOGGER_NAME = "flow"

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())

_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.contextvars.merge_contextvars,
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.KeyValueRenderer(key_order=["event"], drop_missing=True),
]

_console_handler: Optional[logging.Handler] = None


def get_logger() -> Any:
    """structlog bound logger writing to the "flow" stdlib logger."""
    return structlog.wrap_logger(
        logging.getLogger(LOGGER_NAME),
        processors=_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def configure_structlog(log_level: str = "INFO", stream: Optional[IO[str]] = None) -> logging.Logger:
    """
    Send flow's events at or above log_level to stream (stderr by default).

    Calling it again replaces the previous console handler, so the level
    and stream can be changed at runtime without duplicating output.
    """
    global _console_handler

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    if _console_handler is not None:
        logger.removeHandler(_console_handler)
    _console_handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    _console_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)-8s] %(message)s"))
    logger.addHandler(_console_handler)
    return logger
