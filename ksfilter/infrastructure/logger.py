#!/usr/bin/env python3
"""Structured logging system for ksfilter.

This module provides a structured logging system with:
- Log levels mirroring Python's logging module
- Structured context (key-value pairs) appended to each message
- A shared global logger

Example:
    >>> logger = Logger(level=LogLevel.INFO)
    >>> logger.warning("Skipping invalid element", label="s0", spec="//")
"""

import logging
from enum import IntEnum
from typing import Any, Dict, List, Optional, TextIO, Union


class LogLevel(IntEnum):
    """Log levels matching Python's logging module."""

    DEBUG = logging.DEBUG  # 10
    INFO = logging.INFO  # 20
    WARNING = logging.WARNING  # 30
    ERROR = logging.ERROR  # 40
    CRITICAL = logging.CRITICAL  # 50


def create_console_handler(stream: Optional[TextIO] = None) -> logging.StreamHandler:
    """Create console handler with the default formatting.

    Args:
        stream: Output stream (defaults to stderr)

    Returns:
        Configured console handler
    """
    handler = logging.StreamHandler(stream)
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    return handler


class Logger:
    """Structured logger with context support.

    Key-value context passed to a log call is rendered after the message as
    ``msg | key=value ...`` and also attached to the record as
    ``record.context``.
    """

    def __init__(
        self,
        name: str = "ksfilter",
        level: Union[LogLevel, str] = LogLevel.WARNING,
        handlers: Optional[List[logging.Handler]] = None,
    ):
        """Initialize logger.

        Without explicit handlers, handlers already attached to the named
        logger are kept; a console handler is added only if there are none.

        Args:
            name: Logger name for identification
            level: Minimum log level to output
            handlers: Optional list of handlers replacing the current ones
        """
        self.name = name
        self.logger = logging.getLogger(name)
        self.set_level(level)

        if handlers is not None:
            self.logger.handlers.clear()
            for handler in handlers:
                self.logger.addHandler(handler)

            # Prevent propagation to root logger
            self.logger.propagate = False
        elif not self.logger.handlers:
            self.logger.addHandler(create_console_handler())
            self.logger.propagate = False

    def set_level(self, level: Union[LogLevel, str]) -> None:
        """Set the minimum log level.

        Args:
            level: New log level (LogLevel or string)
        """
        if isinstance(level, str):
            level = LogLevel[level.upper()]
        self.logger.setLevel(level)

    def get_level(self) -> LogLevel:
        """Get current log level."""
        return LogLevel(self.logger.level)

    def _format_message(self, msg: str, context: Dict[str, Any]) -> str:
        """Format message with context.

        Args:
            msg: Log message
            context: Context dictionary

        Returns:
            Formatted message with context
        """
        if context:
            ctx_str = " ".join(f"{k}={v}" for k, v in context.items())
            return f"{msg} | {ctx_str}"
        return msg

    def _log(self, level: LogLevel, msg: str, context: Dict[str, Any]) -> None:
        if self.logger.isEnabledFor(level):
            formatted_msg = self._format_message(msg, context)
            self.logger.log(level, formatted_msg, extra={"context": context})

    def debug(self, msg: str, **context) -> None:
        """Log debug message."""
        self._log(LogLevel.DEBUG, msg, context)

    def warning(self, msg: str, **context) -> None:
        """Log warning message.

        Args:
            msg: Log message
            **context: Additional context key-value pairs
        """
        self._log(LogLevel.WARNING, msg, context)


# Global logger instance
_global_logger: Optional[Logger] = None


def get_logger(name: str = "ksfilter") -> Logger:
    """Get or create a logger instance.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    global _global_logger
    if _global_logger is None or _global_logger.name != name:
        _global_logger = Logger(name=name)
    return _global_logger


def set_global_logger(logger: Optional[Logger]) -> None:
    """Set the global logger instance.

    Args:
        logger: Logger to use globally, or None to recreate it on demand
    """
    global _global_logger
    _global_logger = logger
