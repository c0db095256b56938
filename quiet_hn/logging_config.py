"""Structured logging configuration for quiet-hn."""

import logging
import sys

import structlog

SHARED_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]


def configure_logging(level: str = "INFO") -> str:
    """
    Route structlog through stdlib logging at ``level``.

    Renders JSON when stderr is not a terminal (server under a supervisor),
    colored console lines otherwise. Returns the renderer name.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=numeric_level)

    renderer_name = "json" if _is_json_mode() else "console"
    renderer = (
        structlog.processors.JSONRenderer()
        if renderer_name == "json"
        else structlog.dev.ConsoleRenderer(colors=True)
    )
    structlog.configure(
        processors=[*SHARED_PROCESSORS, renderer],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    get_logger(__name__).debug(
        "logging_configured",
        level=logging.getLevelName(numeric_level),
        renderer=renderer_name,
    )
    return renderer_name


def _is_json_mode() -> bool:
    """Check if we should output JSON logs."""
    return not sys.stderr.isatty()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
