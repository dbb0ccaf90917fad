#!/usr/bin/env python3
"""Tests for the Logger module."""

import io
import logging

import pytest

from ksfilter.infrastructure.logger import (
    LogLevel,
    Logger,
    create_console_handler,
    get_logger,
    set_global_logger,
)


class TestLogLevel:
    """Tests for LogLevel enum."""

    def test_log_levels(self):
        """Test log level values match Python logging."""
        assert LogLevel.DEBUG == logging.DEBUG
        assert LogLevel.INFO == logging.INFO
        assert LogLevel.WARNING == logging.WARNING
        assert LogLevel.ERROR == logging.ERROR
        assert LogLevel.CRITICAL == logging.CRITICAL


class TestConsoleHandler:
    """Tests for create_console_handler()."""

    def test_writes_formatted_line(self):
        """Test the handler writes name, level and message."""
        stream = io.StringIO()
        logger = Logger(
            name="ksfilter.test.console",
            level=LogLevel.WARNING,
            handlers=[create_console_handler(stream)],
        )
        logger.warning("Skipping", spec="//")

        line = stream.getvalue().strip()
        assert line.endswith("ksfilter.test.console - WARNING - Skipping | spec=//")


class TestLogger:
    """Tests for Logger class."""

    def test_logger_creation(self):
        """Test creating a logger."""
        logger = Logger(name="ksfilter.test.creation", level=LogLevel.DEBUG)
        assert logger.name == "ksfilter.test.creation"
        assert logger.get_level() == LogLevel.DEBUG
        assert logger.logger.propagate is False
        assert len(logger.logger.handlers) == 1

    def test_default_level_is_warning(self):
        """Diagnostics are warnings, so WARNING is the default."""
        logger = Logger(name="ksfilter.test.default")
        assert logger.get_level() == LogLevel.WARNING

    def test_string_level(self):
        """Test level given as a string."""
        logger = Logger(name="ksfilter.test.string", level="info")
        assert logger.get_level() == LogLevel.INFO

    def test_unknown_string_level(self):
        """Unknown level names raise KeyError."""
        with pytest.raises(KeyError):
            Logger(name="ksfilter.test.unknown", level="LOUD")

    def test_context_formatting(self, test_logger, recording_handler):
        """Test context is appended to the message."""
        test_logger.warning("Skipping", label="s0", spec="//")

        record = recording_handler.records[0]
        assert record.getMessage() == "Skipping | label=s0 spec=//"
        assert record.context == {"label": "s0", "spec": "//"}

    def test_message_without_context(self, test_logger, recording_handler):
        """Test plain messages are unchanged."""
        test_logger.debug("Plain")
        assert recording_handler.messages == ["Plain"]

    def test_level_filtering(self, test_logger, recording_handler):
        """Test messages below the level are dropped."""
        test_logger.set_level(LogLevel.WARNING)
        test_logger.debug("hidden")
        test_logger.warning("shown")

        assert recording_handler.messages == ["shown"]


class TestHostHandlers:
    """Handlers attached by an embedding application."""

    def test_existing_handlers_kept(self, recording_handler):
        """Test building a Logger without handlers leaves host handlers alone."""
        host_handler = recording_handler
        std_logger = logging.getLogger("ksfilter.test.host_kept")
        std_logger.addHandler(host_handler)
        try:
            logger = Logger(name="ksfilter.test.host_kept")
            logger.warning("kept")

            assert std_logger.handlers == [host_handler]
            assert host_handler.messages == ["kept"]
        finally:
            std_logger.removeHandler(host_handler)

    def test_repeated_construction_adds_one_console(self):
        """Test a second Logger for the same name does not stack handlers."""
        Logger(name="ksfilter.test.host_repeat")
        logger = Logger(name="ksfilter.test.host_repeat")
        assert len(logger.logger.handlers) == 1

    def test_explicit_handlers_replace(self, recording_handler):
        """Test handlers passed in replace the attached ones."""
        old_stream = io.StringIO()
        logging.getLogger("ksfilter.test.host_replace").addHandler(create_console_handler(old_stream))

        logger = Logger(name="ksfilter.test.host_replace", handlers=[recording_handler])
        logger.warning("routed")

        assert logger.logger.handlers == [recording_handler]
        assert old_stream.getvalue() == ""
        assert recording_handler.messages == ["routed"]


class TestGlobalLogger:
    """Tests for the global logger accessors."""

    def teardown_method(self):
        set_global_logger(None)

    def test_get_logger_is_cached(self):
        """Test the same instance is returned for the same name."""
        assert get_logger("ksfilter.test.global") is get_logger("ksfilter.test.global")

    def test_get_logger_new_name(self):
        """Test a different name replaces the global logger."""
        first = get_logger("ksfilter.test.a")
        second = get_logger("ksfilter.test.b")
        assert first is not second
        assert second.name == "ksfilter.test.b"

    def test_set_global_logger(self, recording_handler):
        """Test set_global_logger()."""
        logger = Logger(name="ksfilter", handlers=[recording_handler])
        set_global_logger(logger)
        assert get_logger() is logger
