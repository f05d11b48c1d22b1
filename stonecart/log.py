"""structlog configuration shared by the library, CLI and tests."""

import logging
import os

import structlog


def configure_logging(level: str = None, json_output: bool = None) -> None:
    """Configure structlog once for the process.

    Level and renderer default to STONECART_LOG_LEVEL (INFO) and
    STONECART_LOG_JSON (true).
    """
    level = (level or os.environ.get("STONECART_LOG_LEVEL", "INFO")).upper()
    if json_output is None:
        json_output = os.environ.get("STONECART_LOG_JSON", "true").lower() not in ("0", "false", "no")

    numeric_level = logging.getLevelName(level)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(**context):
    """Return a structlog logger bound with the given context."""
    return structlog.get_logger().bind(**context)
