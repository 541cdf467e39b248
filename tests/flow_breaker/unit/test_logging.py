from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import Protocol, cast

import pytest
import structlog

from flow_breaker.logging import (
    configure_structlog,
    get_log_level_value,
    log_debug,
    log_info,
    log_warning,
)
from tests.flow_breaker.support.fakes import FakeLogger


def _configured_renderer() -> object:
    root_handler = logging.getLogger().handlers[0]
    formatter = root_handler.formatter
    assert isinstance(formatter, structlog.stdlib.ProcessorFormatter)
    return formatter.processors[-1]


def test_get_log_level_value_maps_known_levels() -> None:
    assert get_log_level_value("debug") == logging.DEBUG
    assert get_log_level_value(" warning ") == logging.WARNING
    assert get_log_level_value("CRITICAL") == logging.CRITICAL


def test_get_log_level_value_rejects_unknown_level() -> None:
    with pytest.raises(ValueError, match="log_level must be one of"):
        get_log_level_value("TRACE")


def test_configure_structlog_replaces_root_handler(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(sys.stderr, "isatty", lambda: False, raising=False)

    configure_structlog(log_level="INFO")
    configure_structlog(log_level="DEBUG")

    assert len(logging.getLogger().handlers) == 1
    assert logging.getLogger().level == logging.DEBUG


@pytest.mark.parametrize(
    ("isatty", "renderer_type"),
    [
        (True, structlog.dev.ConsoleRenderer),
        (False, structlog.processors.JSONRenderer),
    ],
)
def test_configure_structlog_selects_renderer(
    monkeypatch: pytest.MonkeyPatch,
    isatty: bool,
    renderer_type: type,
) -> None:
    monkeypatch.setattr(sys.stderr, "isatty", lambda: isatty, raising=False)

    configure_structlog(log_level="INFO")

    assert isinstance(_configured_renderer(), renderer_type)


class _CaptureHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


class _RecordWithBreakerFields(Protocol):
    breaker_id: str
    error_count: int


@pytest.mark.parametrize(
    ("log_fn", "level"),
    [
        (log_debug, "debug"),
        (log_info, "info"),
        (log_warning, "warning"),
    ],
)
def test_structured_log_helpers_forward_keyword_fields(
    log_fn: Callable[..., None],
    level: str,
) -> None:
    logger = FakeLogger()

    log_fn(logger, "circuit_breaker.transition", breaker_id="svc", error_count=2)

    assert logger.calls == [
        (level, "circuit_breaker.transition", {"breaker_id": "svc", "error_count": 2})
    ]


def test_structured_log_helpers_support_stdlib_logger_extra() -> None:
    logger = logging.getLogger("tests.flow_breaker.logging.helpers")
    logger.handlers.clear()
    logger.propagate = False
    logger.setLevel(logging.DEBUG)
    handler = _CaptureHandler()
    logger.addHandler(handler)

    log_debug(logger, "circuit_breaker.check", breaker_id="svc", error_count=3)

    assert len(handler.records) == 1
    record = handler.records[0]
    typed_record = cast(_RecordWithBreakerFields, record)
    assert record.getMessage() == "circuit_breaker.check"
    assert typed_record.breaker_id == "svc"
    assert typed_record.error_count == 3
