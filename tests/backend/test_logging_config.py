"""Tests for the loguru setup and stdlib interception."""

from __future__ import annotations

import logging

import pytest
from loguru import logger

from logging_config import HTTP_CLIENT_LOGGERS, InterceptHandler, setup_logging


@pytest.fixture(autouse=True)
def _restore_logging():
    yield
    setup_logging()


def _capture() -> tuple[list[str], int]:
    messages: list[str] = []
    sink_id = logger.add(lambda message: messages.append(str(message)), format="{message}")
    return messages, sink_id


def test_stdlib_records_reach_loguru():
    setup_logging()
    messages, sink_id = _capture()

    logging.getLogger("uvicorn.error").warning("port 8000 in use")

    logger.remove(sink_id)
    assert any("port 8000 in use" in m for m in messages)


def test_http_client_loggers_quiet_by_default():
    setup_logging()
    for name in HTTP_CLIENT_LOGGERS:
        stdlib_logger = logging.getLogger(name)
        assert stdlib_logger.level == logging.WARNING
        assert isinstance(stdlib_logger.handlers[0], InterceptHandler)

    messages, sink_id = _capture()
    logging.getLogger("httpx").info("HTTP Request: POST http://localhost:11434/api/generate")
    logger.remove(sink_id)
    assert messages == []


def test_http_requests_logged_when_enabled():
    setup_logging(log_http_requests=True)
    messages, sink_id = _capture()

    logging.getLogger("httpx").info("HTTP Request: POST http://localhost:11434/api/generate")

    logger.remove(sink_id)
    assert any("/api/generate" in m for m in messages)
