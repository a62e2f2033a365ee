"""Tests for structlog and stdlib logging setup."""

import json
import logging
from collections.abc import Generator
from typing import Any

import pytest
import structlog

from decap_oauth.core.logging import get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_logging() -> Generator[None, None, None]:
    """Undo global logging changes made by setup_logging."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("uvicorn.access").disabled = False
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


def json_lines(output: str) -> list[dict[str, Any]]:
    return [json.loads(line) for line in output.splitlines() if line.strip()]


def test_json_logs_include_context(capsys: pytest.CaptureFixture[str]) -> None:
    setup_logging(json_logs=True, log_level="INFO")
    structlog.contextvars.bind_contextvars(request_id="req-42")

    get_logger("decap_oauth.test").info("oauth_authorize_redirect", provider="github")

    [entry] = json_lines(capsys.readouterr().out)
    assert entry["event"] == "oauth_authorize_redirect"
    assert entry["provider"] == "github"
    assert entry["request_id"] == "req-42"
    assert entry["level"] == "info"
    assert entry["logger"] == "decap_oauth.test"
    assert "timestamp" in entry


def test_json_logs_render_structured_exceptions(
    capsys: pytest.CaptureFixture[str],
) -> None:
    setup_logging(json_logs=True)

    try:
        raise ValueError("boom")
    except ValueError:
        get_logger("decap_oauth.test").exception("exchange_crashed")

    [entry] = json_lines(capsys.readouterr().out)
    assert entry["event"] == "exchange_crashed"
    assert isinstance(entry["exception"], list)
    assert entry["exception"][0]["exc_type"] == "ValueError"


def test_stdlib_records_share_the_pipeline(
    capsys: pytest.CaptureFixture[str],
) -> None:
    setup_logging(json_logs=True)
    structlog.contextvars.bind_contextvars(request_id="req-7")

    logging.getLogger("uvicorn.error").warning("listener closed")

    [entry] = json_lines(capsys.readouterr().out)
    assert entry["event"] == "listener closed"
    assert entry["level"] == "warning"
    assert entry["request_id"] == "req-7"


def test_level_filters_debug(capsys: pytest.CaptureFixture[str]) -> None:
    setup_logging(json_logs=True, log_level="WARNING")

    get_logger("decap_oauth.test").info("dropped")

    assert capsys.readouterr().out == ""


def test_console_output_and_quiet_loggers(
    capsys: pytest.CaptureFixture[str],
) -> None:
    setup_logging(json_logs=False, log_level="info")

    get_logger("decap_oauth.test").info("server_start")

    assert "server_start" in capsys.readouterr().out
    assert logging.getLogger("uvicorn.access").disabled
    assert logging.getLogger("httpx").level == logging.WARNING


def test_debug_lets_httpx_through() -> None:
    setup_logging(log_level="DEBUG")

    assert logging.getLogger("httpx").level == logging.DEBUG


def test_unknown_level_falls_back_to_info() -> None:
    setup_logging(log_level="chatty")

    assert logging.getLogger().level == logging.INFO
