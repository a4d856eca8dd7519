"""Structured logging configuration using structlog.

Both the probe (running inside locust) and the AZ reporting service log
through structlog: JSON lines in production, coloured console output
during development.
"""

import logging
import sys
from typing import Literal

import structlog
from structlog.types import Processor

# Libraries that log every connection at INFO.
NOISY_LOGGERS = ("urllib3", "uvicorn.access")


def configure_logging(
    level: str = "INFO",
    format: Literal["json", "console"] = "json",
) -> None:
    """Configure structured logging for the process.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR).
        format: Output format ('json' for production, 'console' for development).
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.ExtraAdder(),
    ]

    if format == "json":
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    numeric_level = getattr(logging, level.upper())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    # Locust installs its own root handlers; basicConfig leaves them alone.
    logging.basicConfig(
        format="%(message)s",
        level=numeric_level,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    if numeric_level > logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Optional logger name (typically __name__).

    Returns:
        Configured structlog logger instance.
    """
    return structlog.get_logger(name)  # type: ignore[no-any-return]
