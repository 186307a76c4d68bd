"""Structured logging configuration using structlog."""

import logging
import os
import sys
from typing import Any, TextIO

import structlog

LOG_LEVEL_ENV = "PANELMAP_LOG_LEVEL"


def configure_logging(
    level: str | None = None,
    json_output: bool = False,
    stream: TextIO | None = None,
) -> None:
    """
    Configure structured logging for the application.

    Normalized output goes to stdout, so logs default to stderr.

    Args:
        level: Log level name. Falls back to $PANELMAP_LOG_LEVEL, then INFO.
        json_output: If True, render one JSON object per line.
        stream: Destination stream (defaults to stderr).
    """
    level_name = (level or os.environ.get(LOG_LEVEL_ENV) or "INFO").upper()
    log_level = getattr(logging, level_name, logging.INFO)
    stream = stream or sys.stderr

    logging.basicConfig(format="%(message)s", stream=stream, level=log_level)

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json_output:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=stream.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger, typically with ``__name__``."""
    return structlog.get_logger(name)


def log_context(**kwargs: Any) -> structlog.contextvars.bound_contextvars:
    """
    Bind values to every log line emitted inside the block.

    Example:
        with log_context(location_data="table", input="result.json"):
            log.info("Normalized table rows")
    """
    return structlog.contextvars.bound_contextvars(**kwargs)
