from __future__ import annotations

import logging
import sys

import structlog

# Driver loggers that are chatty at INFO and say nothing about the workbench itself
_QUIET_LOGGERS = ("aiosqlite", "sqlalchemy.engine", "asyncio")


def setup_logging(level: str = "INFO", json_logs: bool | None = None) -> None:
    """Configure stdlib logging and structlog for the workbench.

    Console output on a TTY, JSON lines everywhere else unless ``json_logs``
    forces one or the other.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", level=log_level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    if json_logs is None:
        json_logs = not sys.stderr.isatty()
    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
