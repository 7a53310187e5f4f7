"""
Structured logging configuration for CompareAI.

Uses structlog for JSON-formatted, context-rich logging.
"""

from __future__ import annotations

import logging
import sys
import time
from typing import Any

import structlog
from structlog.types import Processor

from compareai.core.config import get_settings


def setup_logging(
    level: str | None = None,
    json_format: bool | None = None,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON output format
    """
    settings = get_settings()
    level = (level or settings.compare.log_level).upper()
    if json_format is None:
        json_format = settings.compare.log_format == "json"

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level),
    )

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


class RequestLogger:
    """
    Context manager that brackets one operation with start/finish log lines.

    The operation's context is bound to contextvars for its duration, so log
    calls made by the orchestrator and providers inherit it.
    """

    def __init__(
        self,
        logger: structlog.BoundLogger,
        operation: str,
        **context: Any,
    ):
        self.logger = logger.bind(operation=operation, **context)
        self.operation = operation
        self._context = {"operation": operation, **context}
        self._start = 0.0

    def __enter__(self) -> "RequestLogger":
        structlog.contextvars.bind_contextvars(**self._context)
        self._start = time.perf_counter()
        self.logger.info(f"Starting {self.operation}")
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        elapsed_ms = (time.perf_counter() - self._start) * 1000
        if exc_type:
            self.logger.error(
                f"Failed {self.operation}",
                error=str(exc_val),
                error_type=exc_type.__name__,
                elapsed_ms=round(elapsed_ms, 1),
            )
        else:
            self.logger.info(f"Completed {self.operation}", elapsed_ms=round(elapsed_ms, 1))
        structlog.contextvars.unbind_contextvars(*self._context)
