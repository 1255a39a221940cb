"""Logging setup for the CLI: structlog events rendered through stdlib handlers.

Library modules only call ``structlog.get_logger`` / ``logging.getLogger``;
nothing is configured until ``setup_logging`` runs. Output goes to stderr so
generated commands on stdout stay clean.

Environment (explicit arguments win):
    NATIVE_BUILDER_LOG_LEVEL  — level for the ``native_builder`` loggers (INFO)
    NATIVE_BUILDER_LOG_FORMAT — console | json (console)
"""

from __future__ import annotations

import logging
import logging.config
import os

import structlog

LOGGER_NAME = "native_builder"

_RENDERERS = {
    "console": lambda: structlog.dev.ConsoleRenderer(colors=False),
    "json": structlog.processors.JSONRenderer,
}


def _pre_chain() -> list[structlog.types.Processor]:
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="%H:%M:%S"),
        structlog.processors.format_exc_info,
    ]


def _renderer(fmt: str) -> structlog.types.Processor:
    try:
        return _RENDERERS[fmt]()
    except KeyError:
        raise ValueError(
            f"Unknown log format {fmt!r}; expected one of {', '.join(_RENDERERS)}"
        ) from None


def setup_logging(
    level: str | None = None,
    fmt: str | None = None,
    stream: str = "ext://sys.stderr",
) -> None:
    log_level = (level or os.environ.get("NATIVE_BUILDER_LOG_LEVEL", "INFO")).upper()
    renderer = _renderer((fmt or os.environ.get("NATIVE_BUILDER_LOG_FORMAT", "console")).lower())
    pre_chain = _pre_chain()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Third-party loggers stay at WARNING via the root logger.
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structlog": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": pre_chain,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        renderer,
                    ],
                },
            },
            "handlers": {
                "default": {"class": "logging.StreamHandler", "stream": stream, "formatter": "structlog"},
            },
            "root": {"handlers": ["default"], "level": "WARNING"},
            "loggers": {LOGGER_NAME: {"level": log_level}},
        }
    )
