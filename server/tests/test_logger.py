"""
Unit tests for logger setup and phase events.
"""

import logging

from deepscan.utils.logger import log_event, setup_logger


class RecordingHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


class TestSetupLogger:
    """Tests for setup_logger."""

    def test_component_loggers_are_namespaced(self):
        assert setup_logger("test-namespace").name == "deepscan.test-namespace"
        assert setup_logger().name == "deepscan"

    def test_handlers_attached_once(self):
        first = setup_logger("test-once")
        second = setup_logger("test-once")

        assert first is second
        assert len(second.handlers) == 1

    def test_env_level_override(self, monkeypatch):
        monkeypatch.setenv("DEEPSCAN_LOG_LEVEL", "warning")

        assert setup_logger("test-env", logging.DEBUG).level == logging.WARNING

    def test_unknown_env_level_keeps_default(self, monkeypatch):
        monkeypatch.setenv("DEEPSCAN_LOG_LEVEL", "chatty")

        assert setup_logger("test-env-bad", logging.DEBUG).level == logging.DEBUG


class TestLogEvent:
    """Tests for log_event."""

    def test_renders_fields_and_attaches_extra(self):
        logger = setup_logger("test-events", logging.DEBUG)
        handler = RecordingHandler()
        logger.addHandler(handler)
        try:
            log_event(logger, "page-start", url="https://example.com/", index=0)
        finally:
            logger.removeHandler(handler)

        record = handler.records[0]
        assert record.getMessage() == "[EVENT] page-start url=https://example.com/ index=0"
        assert record.event == "page-start"
        assert record.fields == {"url": "https://example.com/", "index": 0}

    def test_event_without_fields(self):
        logger = setup_logger("test-bare-event", logging.DEBUG)
        handler = RecordingHandler()
        logger.addHandler(handler)
        try:
            log_event(logger, "scan-complete")
        finally:
            logger.removeHandler(handler)

        assert handler.records[0].getMessage() == "[EVENT] scan-complete"
