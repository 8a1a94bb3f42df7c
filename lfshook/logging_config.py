"""lfshook diagnostics logging configuration.

The library itself only calls ``structlog.get_logger``; applications decide
where those diagnostics go. ``setup_logging`` is a convenience for scripts and
tests that want structlog rendered through stdlib logging.

Environment:
    LFSHOOK_LOG_LEVEL  - diagnostics level (default: WARNING)
    LFSHOOK_LOG_FORMAT - console | json (default: console)
"""

from __future__ import annotations

import logging
import logging.config
import os

import structlog


def setup_logging(level: str | None = None) -> None:
    """Configure structlog and stdlib logging for lfshook diagnostics.

    Args:
        level: Optional override for `LFSHOOK_LOG_LEVEL`.
    """
    if level:
        os.environ["LFSHOOK_LOG_LEVEL"] = level

    log_level = os.environ.get("LFSHOOK_LOG_LEVEL", "WARNING").upper()
    log_format = os.environ.get("LFSHOOK_LOG_FORMAT", "console").lower()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structlog": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": shared_processors,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        renderer,
                    ],
                },
            },
            "handlers": {
                "diagnostics": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "structlog",
                },
            },
            "loggers": {
                "lfshook": {
                    "handlers": ["diagnostics"],
                    "level": log_level,
                    "propagate": False,
                },
            },
        }
    )
