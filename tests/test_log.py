"""Tests for stoptoken.log — logger namespace, formatters and setup."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from stoptoken import StopSource, StopToken, stop_stream
from stoptoken.log import (
    _PREFIX,
    JsonFormatter,
    TextFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


def _make_record(
    name: str = "stoptoken.source",
    level: int = logging.INFO,
    msg: str = "hello",
    exc_info: tuple | None = None,  # type: ignore[type-arg]
) -> logging.LogRecord:
    return logging.LogRecord(
        name=name,
        level=level,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


class TestGetLogger:
    def test_returns_child_of_stoptoken(self) -> None:
        log = get_logger("mymodule")
        assert log.name == "stoptoken.mymodule"
        assert isinstance(log, logging.Logger)

    def test_already_prefixed(self) -> None:
        assert get_logger("stoptoken.stream").name == "stoptoken.stream"

    def test_bare_prefix(self) -> None:
        assert get_logger("stoptoken").name == "stoptoken"


class TestConfigureLogging:
    def setup_method(self) -> None:
        reset_logging()

    def test_adds_handler(self) -> None:
        root = logging.getLogger(_PREFIX)
        assert len(root.handlers) == 0
        configure_logging(level="DEBUG")
        assert len(root.handlers) == 1

    def test_idempotent(self) -> None:
        configure_logging(level="DEBUG")
        configure_logging(level="ERROR")
        root = logging.getLogger(_PREFIX)
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG

    def test_force_resets(self) -> None:
        configure_logging(level="DEBUG")
        configure_logging(level="INFO", force=True)
        root = logging.getLogger(_PREFIX)
        assert len(root.handlers) == 1
        assert root.level == logging.INFO

    def test_sets_level_from_int(self) -> None:
        configure_logging(level=logging.ERROR)
        assert logging.getLogger(_PREFIX).level == logging.ERROR

    def test_json_format(self) -> None:
        configure_logging(fmt="json")
        handler = logging.getLogger(_PREFIX).handlers[0]
        assert isinstance(handler.formatter, JsonFormatter)


class TestFormatters:
    def test_text_line(self) -> None:
        line = TextFormatter().format(_make_record())
        assert "INFO stoptoken.source: hello" in line

    def test_text_renders_fields_before_traceback(self) -> None:
        try:
            raise ValueError("boom")
        except ValueError:
            record = _make_record(level=logging.ERROR, exc_info=sys.exc_info())
        record.source_id = "0x1"
        head, _, rest = TextFormatter().format(record).partition("\n")
        assert head.endswith("hello source_id=0x1")
        assert "ValueError: boom" in rest

    def test_json(self) -> None:
        entry = json.loads(JsonFormatter().format(_make_record(level=logging.WARNING)))
        assert entry["level"] == "WARNING"
        assert entry["logger"] == "stoptoken.source"
        assert entry["message"] == "hello"
        assert "timestamp" in entry
        assert "exception" not in entry

    def test_json_includes_fields(self) -> None:
        record = _make_record()
        record.backend = "trio"
        record.delay = 0.05
        entry = json.loads(JsonFormatter().format(record))
        assert entry["backend"] == "trio"
        assert entry["delay"] == 0.05
        assert "source_id" not in entry


class TestLibraryLogging:
    def test_stop_logged_once(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG, logger=_PREFIX)
        source = StopSource()
        source.stop()
        source.stop()
        records = [r for r in caplog.records if r.name == "stoptoken.source"]
        assert len(records) == 1
        assert "triggered" in records[0].getMessage()
        assert records[0].source_id == f"{id(source):#x}"

    @pytest.mark.asyncio
    async def test_deadline_scheduling_logged_with_fields(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.DEBUG, logger=_PREFIX)
        StopToken.from_deadline(0.5)
        [record] = [r for r in caplog.records if r.name == "stoptoken.timers"]
        assert record.getMessage() == "deadline scheduled"
        assert record.backend == "asyncio"
        assert 0 < record.delay <= 0.5

    @pytest.mark.anyio
    async def test_stream_cancellation_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG, logger=_PREFIX)

        async def numbers():  # type: ignore[no-untyped-def]
            yield 1

        async for _ in stop_stream(numbers(), StopToken.cancelled_token()):
            pass
        assert any("stopped by cancellation" in r.getMessage() for r in caplog.records)
