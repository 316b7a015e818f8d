"""structlog setup for the catalog service.

Console output is human readable; when LOG_FILE is set every record is also
appended to it as one JSON object per line. configure_logging() may be called
again (the CLI does, to apply --log-level); get_logger() configures lazily with
the environment defaults otherwise.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator

import structlog

from catalog.config import LOG_FILE, LOG_LEVEL, VERBOSE_LOGGING

BoundLogger = structlog.stdlib.BoundLogger

# Chatty at INFO: one line per HTTP call or SQL statement
NOISY_LOGGERS = ("azure", "httpx", "httpcore", "openai", "sqlalchemy.engine", "uvicorn.access")

_configured = False


def level_from_name(value: str | int | None) -> int:
    if isinstance(value, int):
        return value
    value = (value or "").strip()
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value.upper())
    return level if isinstance(level, int) else logging.INFO


def _stamp_chain() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def _handler(handler: logging.Handler, renderer: Any, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=_stamp_chain()))
    return handler


def configure_logging(level: str | int | None = None, log_file: str | None = None, force: bool = False) -> int:
    """Install handlers on the root logger and point structlog at them. Returns the level used."""
    global _configured
    if _configured and not force:
        return logging.getLogger().level

    if level is None:
        level = logging.DEBUG if VERBOSE_LOGGING else level_from_name(LOG_LEVEL)
    level = level_from_name(level)
    log_file = LOG_FILE if log_file is None else log_file

    handlers = [_handler(logging.StreamHandler(), structlog.dev.ConsoleRenderer(colors=False), level)]
    if log_file:
        handlers.append(
            _handler(logging.FileHandler(log_file, encoding="utf-8"), structlog.processors.JSONRenderer(), level)
        )

    root = logging.getLogger()
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.captureWarnings(True)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    structlog.configure(
        processors=[
            *_stamp_chain(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )
    _configured = True
    return level


def get_logger(name: str = "catalog", **bindings: Any) -> BoundLogger:
    configure_logging()
    logger = structlog.get_logger(name)
    return logger.bind(**bindings) if bindings else logger


@contextmanager
def request_context(**context: Any) -> Iterator[None]:
    """Bind context (request id, path, ...) to every log line emitted inside the block."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**context)
    try:
        yield
    finally:
        structlog.contextvars.clear_contextvars()
