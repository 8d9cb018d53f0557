"""Loguru logging configuration for the backend.

``setup_logging()`` makes loguru the only logging backend: one stderr sink
(coloured text or serialized JSON), with stdlib ``logging`` records from
uvicorn, fastapi and the httpx transport forwarded into it.

The dataset loader and the Ollama client already log one summary line per
fetch or generation, so the per-request lines httpx emits at INFO are held
back unless ``log_http_requests`` is set.
"""

from __future__ import annotations

import logging
import sys

from loguru import logger

_TEXT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

SERVER_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "fastapi")
HTTP_CLIENT_LOGGERS = ("httpx", "httpcore")


class InterceptHandler(logging.Handler):
    """Forward a stdlib ``LogRecord`` to loguru, keeping the caller's frame."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip logging's own frames so loguru reports the real call site.
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore[assignment]
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _route_to_loguru(name: str, handler: logging.Handler, level: int | None = None) -> None:
    stdlib_logger = logging.getLogger(name)
    stdlib_logger.handlers = [handler]
    stdlib_logger.propagate = False
    if level is not None:
        stdlib_logger.setLevel(level)


def setup_logging(
    *, level: str = "INFO", json: bool = False, log_http_requests: bool = False
) -> None:
    """Configure loguru as the single logging backend.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ...).
        json: If True, emit one serialized JSON object per record.
        log_http_requests: If True, pass through httpx's per-request lines.
    """
    logger.remove()
    if json:
        logger.add(sys.stderr, level=level, serialize=True)
    else:
        logger.add(sys.stderr, level=level, format=_TEXT_FORMAT, colorize=True)

    intercept = InterceptHandler()
    for name in SERVER_LOGGERS:
        _route_to_loguru(name, intercept)

    http_level = logging.NOTSET if log_http_requests else logging.WARNING
    for name in HTTP_CLIENT_LOGGERS:
        _route_to_loguru(name, intercept, http_level)

    logging.root.handlers = [intercept]
    logging.root.setLevel(logging.DEBUG)
