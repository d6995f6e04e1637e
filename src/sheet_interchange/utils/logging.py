"""Structured logging utilities for sheet interchange.

This module provides:
- Source/format tracking using contextvars for correlation across a load
- Structured logging with consistent format and metadata
- Performance metrics logging helpers

Usage:
    from sheet_interchange.utils.logging import (
        get_logger,
        LogContext,
        timed_operation,
    )

    logger = get_logger(__name__)

    with LogContext(source="orders.csv", format="csv"):
        logger.info("Parsing document")

    with timed_operation(logger, "csv_parse") as metrics:
        metrics.rows_processed = 120
"""

import logging
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from sheet_interchange.config import settings

_source_var: ContextVar[str | None] = ContextVar("source", default=None)
_format_var: ContextVar[str | None] = ContextVar("format", default=None)
_extra_context_var: ContextVar[dict[str, Any] | None] = ContextVar(
    "extra_context", default=None
)


def get_source() -> str | None:
    """Get the name of the byte source currently being processed."""
    return _source_var.get()


def set_source(source: str | None) -> None:
    """Set the byte source name in context, or None to clear."""
    _source_var.set(source)


def get_format() -> str | None:
    """Get the format tag currently being processed."""
    return _format_var.get()


def set_format(format_tag: str | None) -> None:
    """Set the format tag in context, or None to clear."""
    _format_var.set(format_tag)


def get_extra_context() -> dict[str, Any]:
    """Get additional context from context vars.

    Returns:
        Dictionary of extra context values.
    """
    ctx = _extra_context_var.get()
    return ctx if ctx is not None else {}


def set_extra_context(context: dict[str, Any]) -> None:
    """Set additional context in context vars."""
    _extra_context_var.set(context)


def clear_context() -> None:
    """Clear all context variables."""
    _source_var.set(None)
    _format_var.set(None)
    _extra_context_var.set(None)


@dataclass
class PerformanceMetrics:
    """Container for performance metrics of one parse or serialize call.

    Attributes:
        operation: Name of the operation being measured.
        start_time: When the operation started.
        end_time: When the operation ended.
        duration_seconds: Duration in seconds.
        bytes_processed: Size of the raw input or output.
        rows_processed: Number of rows parsed or written.
        sheets_processed: Number of sheets produced or consumed.
        custom_metrics: Additional custom metrics.
    """

    operation: str
    start_time: datetime = field(default_factory=lambda: datetime.now(UTC))
    end_time: datetime | None = None
    duration_seconds: float = 0.0
    bytes_processed: int = 0
    rows_processed: int = 0
    sheets_processed: int = 0
    custom_metrics: dict[str, Any] = field(default_factory=dict)

    def finish(self) -> None:
        """Mark the operation as complete and calculate duration."""
        self.end_time = datetime.now(UTC)
        self.duration_seconds = (self.end_time - self.start_time).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging, omitting zero counters."""
        result: dict[str, Any] = {
            "operation": self.operation,
            "duration_seconds": self.duration_seconds,
        }
        if self.bytes_processed > 0:
            result["bytes_processed"] = self.bytes_processed
        if self.rows_processed > 0:
            result["rows_processed"] = self.rows_processed
        if self.sheets_processed > 0:
            result["sheets_processed"] = self.sheets_processed
        if self.custom_metrics:
            result["custom_metrics"] = self.custom_metrics
        return result


class StructuredLogFormatter(logging.Formatter):
    """Log formatter that prefixes records with the active source and format."""

    def format(self, record: logging.LogRecord) -> str:
        prefix_parts = []
        source = get_source()
        if source:
            prefix_parts.append(f"source={source}")
        format_tag = get_format()
        if format_tag:
            prefix_parts.append(f"format={format_tag}")
        for key, value in get_extra_context().items():
            prefix_parts.append(f"{key}={value}")

        prefix = f"[{' '.join(prefix_parts)}] " if prefix_parts else ""

        original_msg = record.msg
        record.msg = f"{prefix}{original_msg}"
        result = super().format(record)
        record.msg = original_msg

        return result


class StructuredLogger:
    """Logger wrapper that appends key=value pairs to messages.

    Wraps a standard Python logger with additional methods for
    performance metrics and structured error logging.
    """

    def __init__(self, name: str) -> None:
        self._logger = logging.getLogger(name)
        self._name = name

    @property
    def logger(self) -> logging.Logger:
        """Access the underlying Python logger."""
        return self._logger

    def _build_message(
        self,
        message: str,
        **kwargs: Any,
    ) -> str:
        if not kwargs:
            return message

        parts = [f"{k}={v}" for k, v in kwargs.items()]
        return f"{message} | {', '.join(parts)}"

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(self._build_message(message, **kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(self._build_message(message, **kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(self._build_message(message, **kwargs))

    def error(self, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        self._logger.error(self._build_message(message, **kwargs), exc_info=exc_info)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log an exception with traceback."""
        self._logger.exception(self._build_message(message, **kwargs))

    def log_performance(self, metrics: PerformanceMetrics) -> None:
        """Log performance metrics at DEBUG level."""
        self.debug(
            f"Performance: {metrics.operation}",
            **metrics.to_dict(),
        )


class LogContext:
    """Context manager for adding temporary context to logs.

    Usage:
        with LogContext(source="report.tsv", format="tsv"):
            logger.info("Loading...")  # Will include source and format
    """

    def __init__(self, **kwargs: Any) -> None:
        self._new_context = dict(kwargs)
        self._old_context: dict[str, Any] = {}
        self._old_source: str | None = None
        self._old_format: str | None = None

    def __enter__(self) -> "LogContext":
        self._old_context = get_extra_context().copy()
        self._old_source = get_source()
        self._old_format = get_format()

        context = dict(self._new_context)
        source = context.pop("source", None)
        format_tag = context.pop("format", None)

        if source is not None:
            set_source(source)
        if format_tag is not None:
            set_format(format_tag)

        merged = self._old_context.copy()
        merged.update(context)
        set_extra_context(merged)

        return self

    def __exit__(self, *args: Any) -> None:
        set_extra_context(self._old_context)
        set_source(self._old_source)
        set_format(self._old_format)


@contextmanager
def timed_operation(
    logger: StructuredLogger,
    operation: str,
) -> Generator[PerformanceMetrics, None, None]:
    """Context manager for timing operations.

    Usage:
        with timed_operation(logger, "csv_parse") as metrics:
            metrics.rows_processed = 10

        # Logs: "Performance: csv_parse | duration_seconds=..."

    Args:
        logger: Logger to use for output.
        operation: Name of the operation.

    Yields:
        PerformanceMetrics instance for tracking.
    """
    metrics = PerformanceMetrics(operation=operation)
    try:
        yield metrics
    finally:
        metrics.finish()
        logger.log_performance(metrics)


def configure_logging(
    level: int | str | None = None,
    format_string: str | None = None,
    use_structured_formatter: bool = True,
) -> None:
    """Configure root logging for applications embedding the library.

    Args:
        level: Log level (int or string like "INFO"). Defaults to the
            configured `log_level`, or DEBUG when `debug` is set.
        format_string: Custom format string (uses default if None).
        use_structured_formatter: Whether to use the structured formatter.
    """
    if level is None:
        level = logging.DEBUG if settings.debug else settings.log_level_int
    elif isinstance(level, str):
        level = getattr(logging, level.upper())

    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)

    formatter: logging.Formatter
    if use_structured_formatter:
        formatter = StructuredLogFormatter(format_string)
    else:
        formatter = logging.Formatter(format_string)

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger for a module.

    Args:
        name: Logger name (typically __name__).

    Returns:
        StructuredLogger instance.

    Example:
        logger = get_logger(__name__)
        logger.info("Parsed document", format="csv", rows=10)
    """
    return StructuredLogger(name)
