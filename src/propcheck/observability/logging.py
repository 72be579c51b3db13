"""Structured logging for propcheck.

Library modules log through the standard ``logging`` module
(``logging.getLogger(__name__)``) and attach key-value data with
``extra={"structured_data": {...}}``. This module only decides how those
records are rendered:

- JSON lines for machine consumption (CI logs, aggregation)
- Human-readable colored output for local runs
- Context fields bound with ``log_context`` (e.g. the property name)

Example:
    Basic usage::

        from propcheck.observability.logging import configure_logging, log_context

        configure_logging(level="DEBUG", json_format=True)

        with log_context(property="reverse_involution"):
            report = check(prop)  # driver records include property=...
"""

from __future__ import annotations

import json
import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, TextIO

_context_fields: ContextVar[dict[str, Any] | None] = ContextVar("propcheck_log_context", default=None)


class StructuredFormatter(logging.Formatter):
    """JSON-lines formatter.

    Each record becomes one object with ``timestamp``, ``level``,
    ``logger`` and ``message``, plus ``context`` (fields bound with
    ``log_context``) and ``data`` (the record's ``structured_data``).

    Attributes:
        include_location: Whether to include file/line/function in output.
        extra_fields: Additional fields to include in every log record.
    """

    def __init__(self, include_location: bool = False, extra_fields: dict[str, Any] | None = None) -> None:
        super().__init__()
        self.include_location = include_location
        self.extra_fields = extra_fields or {}

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_location:
            log_data["location"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        context = _context_fields.get()
        if context:
            log_data["context"] = dict(context)

        structured_data = getattr(record, "structured_data", None)
        if structured_data:
            log_data["data"] = dict(structured_data)

        if record.exc_info and record.exc_info[0] is not None:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        for key, value in self.extra_fields.items():
            log_data.setdefault(key, value)

        return json.dumps(log_data, default=str, ensure_ascii=False)


class HumanReadableFormatter(logging.Formatter):
    """One line per record, level colored when writing to a terminal."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True, stream: TextIO | None = None) -> None:
        super().__init__()
        stream = stream or sys.stderr
        self.use_colors = use_colors and not os.environ.get("NO_COLOR") and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = self.formatTime(record, "%H:%M:%S")
        level = f"{record.levelname:8}"
        if self.use_colors:
            level = f"{self.COLORS.get(record.levelname, '')}{level}{self.RESET}"

        line = f"{timestamp} {level} [{record.name}] {record.getMessage()}"

        context = _context_fields.get()
        if context:
            line += " | " + " ".join(f"{key}={value}" for key, value in context.items())

        structured_data = getattr(record, "structured_data", None)
        if structured_data:
            line += f" | data={json.dumps(structured_data, default=str)}"

        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"

        return line


def configure_logging(
    level: int | str = logging.WARNING,
    json_format: bool = False,
    include_location: bool = False,
    extra_fields: dict[str, Any] | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure the ``propcheck`` logger hierarchy.

    Replaces any handlers previously installed on the ``propcheck`` logger,
    so calling it twice does not duplicate output.

    Example:
        >>> configure_logging(level="DEBUG", json_format=True)
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    root_logger = logging.getLogger("propcheck")
    root_logger.handlers.clear()
    root_logger.propagate = False

    output = stream or sys.stderr
    handler = logging.StreamHandler(output)
    handler.setLevel(level)

    if json_format:
        formatter: logging.Formatter = StructuredFormatter(
            include_location=include_location,
            extra_fields=extra_fields,
        )
    else:
        formatter = HumanReadableFormatter(stream=output)

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    return root_logger


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Add fields to every log record emitted inside the block.

    Example:
        >>> with log_context(property="sort_idempotent", seed=42):
        ...     logger.info("Running")  # Includes both fields
    """
    current = dict(_context_fields.get() or {})
    current.update(kwargs)
    token = _context_fields.set(current)
    try:
        yield
    finally:
        _context_fields.reset(token)


def get_context() -> dict[str, Any]:
    """Get a copy of the current logging context."""
    current = _context_fields.get()
    return dict(current) if current else {}
