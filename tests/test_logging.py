"""Tests for structured logging module."""

import json
import logging

import pytest

from lookup_engine import decompose
from lookup_engine.logging import (
    EngineLogger,
    LogContext,
    LogFormat,
    StructuredFormatter,
    TextFormatter,
    configure_logging,
    get_logger,
)


def make_record(context=None, msg="hello"):
    record = logging.LogRecord("lookup_engine.test", logging.INFO, __file__, 1, msg, None, None)
    if context is not None:
        record.context = context
    return record


class TestLogContext:
    """Tests for LogContext."""

    def test_default_context(self):
        ctx = LogContext()
        assert ctx.component == ""
        assert ctx.operation == ""
        assert ctx.target == ""
        assert ctx.extra == {}

    def test_with_extra(self):
        ctx = LogContext(component="test")
        new_ctx = ctx.with_extra(key="value", num=42)

        assert new_ctx.component == "test"
        assert new_ctx.extra["key"] == "value"
        assert new_ctx.extra["num"] == 42
        # Original unchanged
        assert ctx.extra == {}


class TestEngineLogger:
    """Tests for EngineLogger."""

    def test_create_logger(self):
        logger = EngineLogger("test_component")
        assert logger._context.component == "test_component"
        assert logger._logger.name == "lookup_engine.test_component"

    def test_with_operation(self):
        logger = EngineLogger("test")
        new_logger = logger.with_operation("decompose")

        assert new_logger._context.operation == "decompose"
        assert new_logger._context.component == "test"
        assert logger._context.operation == ""

    def test_with_target(self):
        logger = EngineLogger("test").with_operation("decompose")
        new_logger = logger.with_target("Person")

        assert new_logger._context.target == "Person"
        assert new_logger._context.operation == "decompose"

    def test_debug_records(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="lookup_engine.test_levels"):
            logger = EngineLogger("test_levels")
            logger.debug("debug message")

        assert "debug message" in caplog.text
        assert caplog.records[-1].levelno == logging.DEBUG

    def test_disabled_level_skipped(self, caplog):
        with caplog.at_level(logging.WARNING, logger="lookup_engine.test_quiet"):
            logger = EngineLogger("test_quiet")
            logger.debug("hidden message")

        assert "hidden message" not in caplog.text

    def test_timed_context_manager(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="lookup_engine.test_timed"):
            logger = EngineLogger("test_timed")

            with logger.timed("test_operation") as result:
                _sum = sum(range(100))

            assert "elapsed_ms" in result
            assert result["elapsed_ms"] >= 0

        assert "test_operation completed" in caplog.text

    def test_kwargs_become_context(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="lookup_engine.test_fields"):
            EngineLogger("test_fields").debug("with fields", member="name")

        record = caplog.records[-1]
        assert record.context.extra == {"member": "name"}


class TestFormatters:
    """Tests for the formatters."""

    def test_structured(self):
        context = LogContext(component="composer", operation="decompose", target="Person", extra={"members": 2})
        data = json.loads(StructuredFormatter().format(make_record(context)))

        assert data["message"] == "hello"
        assert data["component"] == "composer"
        assert data["target"] == "Person"
        assert data["members"] == 2

    def test_structured_without_context(self):
        data = json.loads(StructuredFormatter().format(make_record()))

        assert "component" not in data

    def test_text(self):
        context = LogContext(component="composer", operation="decompose", target="Person", extra={"members": 2})
        line = TextFormatter("%(message)s").format(make_record(context))

        assert line == "[composer] (decompose) <Person> hello members=2"


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger(self):
        logger = get_logger("my_component")
        assert logger._context.component == "my_component"

    def test_shared_stdlib_logger(self):
        logger1 = get_logger("cached_component")
        logger2 = get_logger("cached_component")
        assert logger1._logger is logger2._logger


class TestConfigureLogging:
    """Tests for configure_logging function."""

    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger("lookup_engine")
        level, handlers = root.level, list(root.handlers)
        yield
        root.setLevel(level)
        root.handlers[:] = handlers

    def test_configure_text_format(self):
        configure_logging(level=logging.DEBUG, log_format=LogFormat.TEXT)
        root = logging.getLogger("lookup_engine")
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, TextFormatter)

    def test_configure_json_format(self):
        configure_logging(level=logging.INFO, log_format=LogFormat.JSON)
        root = logging.getLogger("lookup_engine")
        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, StructuredFormatter)


class TestComposerLogging:
    """Tests for logs emitted during decomposition."""

    def test_decomposition_logged(self, caplog):
        class Gauge:
            @property
            def value(self) -> int:
                return 1

        with caplog.at_level(logging.DEBUG, logger="lookup_engine.composer"):
            decompose(Gauge())

        record = next(r for r in caplog.records if r.getMessage() == "decomposition completed")
        assert record.context.target == "Gauge"
        assert record.context.extra["members"] == 1

    def test_member_failure_logged(self, caplog):
        class Broken:
            @property
            def value(self) -> int:
                raise ValueError("boom")

        with caplog.at_level(logging.DEBUG, logger="lookup_engine.composer"):
            decompose(Broken())

        record = next(r for r in caplog.records if r.getMessage() == "Member evaluation failed")
        assert record.context.extra == {"member": "value", "error": "ValueError"}
