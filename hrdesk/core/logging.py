"""Structured logging for hrdesk — structlog events rendered through stdlib logging."""

from __future__ import annotations

import logging.config
import os
import sys

import structlog


def setup_logging(level: str | None = None) -> None:
    """Route structlog and stdlib records to one stderr handler.

    Reads from environment variables:
        HRDESK_LOG_LEVEL  — log level (default: INFO)
        HRDESK_LOG_FORMAT — console | json (default: console)

    An explicit *level* overrides ``HRDESK_LOG_LEVEL``. stdout is left to
    the CLI's JSON output.
    """
    log_level = (level or os.environ.get("HRDESK_LOG_LEVEL", "INFO")).upper()
    if os.environ.get("HRDESK_LOG_FORMAT", "console").lower() == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    pre_chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # httpx logs every request at INFO; only show it when debugging.
    transport_level = "DEBUG" if log_level == "DEBUG" else "WARNING"
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "hrdesk": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": pre_chain,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        structlog.processors.format_exc_info,
                        renderer,
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "hrdesk",
                },
            },
            "root": {"handlers": ["stderr"], "level": log_level},
            "loggers": {
                "httpx": {"level": transport_level},
                "httpcore": {"level": "WARNING"},
            },
        }
    )
