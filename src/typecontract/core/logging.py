# src/typecontract/core/logging.py
"""Structured logging for typecontract.

Library modules take their logger from get_logger(__name__). Those
loggers always hand events to the stdlib logger of the same name, so a
program that never configures logging sees only what stdlib's
last-resort handler lets through (WARNING and above, on stderr): debug
events for every contract, enum and table definition stay silent.

configure_logging() is for applications and the test suite. It sets
up structlog's processor chain and attaches ONE handler to the
"typecontract" logger only; the root logger and other libraries'
handlers are never touched.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog
from structlog.stdlib import ProcessorFormatter

LIBRARY_LOGGER = "typecontract"

# Marks the handler installed by configure_logging() so reconfiguring
# replaces it instead of stacking a second one.
_HANDLER_NAME = "typecontract-structlog"


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a bound logger backed by the stdlib logger called name.

    The processor chain is looked up on every bind, so loggers created at
    import time pick up a later configure_logging() call.
    """
    logger: structlog.stdlib.BoundLogger = structlog.wrap_logger(
        logging.getLogger(name),
        wrapper_class=structlog.stdlib.BoundLogger,
    )
    return logger


def configure_logging(
    *,
    json_output: bool = False,
    level: str = "INFO",
    stream: TextIO | None = None,
) -> logging.Logger:
    """Route typecontract events to a stream.

    Args:
        json_output: If True, one JSON object per line. If False, console lines.
        level: Minimum level for typecontract events (DEBUG, INFO, WARNING, ERROR)
        stream: Destination; None means the current sys.stdout

    Returns:
        The configured "typecontract" stdlib logger

    Raises:
        ValueError: If level is not a known log level name
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level: {level}")

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    renderer: Any = (
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[*shared_processors, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Disable caching so tests can reconfigure logging
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stdout if stream is None else stream)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        ProcessorFormatter(
            processors=[
                ProcessorFormatter.remove_processors_meta,
                structlog.processors.format_exc_info,
                renderer,
            ],
            # stdlib records logged under "typecontract.*" get the same fields
            foreign_pre_chain=shared_processors,
        )
    )

    library_logger = logging.getLogger(LIBRARY_LOGGER)
    for existing in list(library_logger.handlers):
        if existing.get_name() == _HANDLER_NAME:
            library_logger.removeHandler(existing)
    library_logger.addHandler(handler)
    library_logger.setLevel(log_level)
    library_logger.propagate = False
    return library_logger
