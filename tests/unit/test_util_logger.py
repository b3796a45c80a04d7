"""
util_logger: JSON formatting, context-bound loggers, exception decorator.
"""

import json
import logging
import sys

import pytest

from util_logger import (
    ComponentType,
    JSONFormatter,
    LogContext,
    LoggerFactory,
    LogLevel,
    log_exceptions,
)


class TestJSONFormatter:
    def test_one_json_object_with_custom_dimensions(self):
        record = logging.LogRecord("repository.Test", logging.INFO, __file__, 10, "hello %s", ("world",), None)
        record.custom_dimensions = {"resource_name": "cdbimport"}
        payload = json.loads(JSONFormatter().format(record))
        assert payload["message"] == "hello world"
        assert payload["level"] == "INFO"
        assert payload["customDimensions"] == {"resource_name": "cdbimport"}

    def test_exception_info_included(self):
        try:
            raise ValueError("bad value")
        except ValueError:
            record = logging.LogRecord("service.Test", logging.ERROR, __file__, 10, "failed", (), sys.exc_info())
        payload = json.loads(JSONFormatter().format(record))
        assert payload["exception"]["type"] == "ValueError"
        assert "bad value" in payload["exception"]["traceback"]


class TestLoggerFactory:
    def test_component_dimensions_injected(self, caplog):
        log = LoggerFactory.create_logger(ComponentType.SERVICE, "LoggerFactoryTest")
        with caplog.at_level(logging.INFO):
            log.info("ping", extra={'custom_dimensions': {'phase': 'connect'}})
        record = caplog.records[-1]
        assert record.custom_dimensions["component_type"] == "service"
        assert record.custom_dimensions["component_name"] == "LoggerFactoryTest"
        assert record.custom_dimensions["phase"] == "connect"

    def test_context_bound_logger(self, caplog):
        log = LoggerFactory.create_with_context(
            ComponentType.SERVICE, "ContextTest", resource_name="saqimport", resource_kind="queue"
        )
        assert log.name == "service.ContextTest.saqimport"
        with caplog.at_level(logging.INFO):
            log.info("seeding")
        dims = caplog.records[-1].custom_dimensions
        assert dims["resource_name"] == "saqimport"
        assert dims["resource_kind"] == "queue"

    def test_handler_added_once(self):
        first = LoggerFactory.create_logger(ComponentType.FACTORY, "OnceTest")
        second = LoggerFactory.create_logger(ComponentType.FACTORY, "OnceTest")
        assert first is second
        assert len([h for h in first.handlers if isinstance(h.formatter, JSONFormatter)]) == 1

    def test_log_context_drops_empty_fields(self):
        assert LogContext(resource_name="x", phase="ensure").to_dict() == {"resource_name": "x", "phase": "ensure"}

    @pytest.mark.parametrize("name,level", [("debug", logging.DEBUG), ("WARNING", logging.WARNING)])
    def test_log_level_from_string(self, name, level):
        assert LogLevel.from_string(name).to_python_level() == level


class TestLogExceptions:
    def test_sync_reraises_and_logs(self, caplog):
        @log_exceptions(ComponentType.SERVICE, "DecoratorTest")
        def explode():
            raise RuntimeError("sync boom")

        with caplog.at_level(logging.ERROR):
            with pytest.raises(RuntimeError):
                explode()
        assert "Exception in explode" in caplog.text

    async def test_async_reraises_and_logs(self, caplog):
        @log_exceptions(ComponentType.SERVICE, "DecoratorTest")
        async def explode():
            raise RuntimeError("async boom")

        with caplog.at_level(logging.ERROR):
            with pytest.raises(RuntimeError):
                await explode()
        assert caplog.records[-1].custom_dimensions["exception_type"] == "RuntimeError"

    async def test_async_return_value_passes_through(self):
        @log_exceptions(ComponentType.SERVICE, "DecoratorTest")
        async def answer():
            return 42

        assert await answer() == 42
