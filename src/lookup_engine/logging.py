"""Structured logging for the lookup engine.

Loggers live under the ``lookup_engine`` namespace and only emit DEBUG
records: when a decomposition starts and completes and when a member fails.
The library installs no handler on its own; hosts call ``configure_logging``
to get text or JSON output on stderr.
"""

import json
import logging
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

ROOT_LOGGER = "lookup_engine"


class LogFormat(Enum):
    """Log output format."""

    TEXT = "text"
    JSON = "json"


@dataclass(frozen=True)
class LogContext:
    """Component, operation and decomposed type attached to every record."""

    component: str = ""
    operation: str = ""
    target: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    def with_extra(self, **kwargs: Any) -> "LogContext":
        return replace(self, extra={**self.extra, **kwargs})


def _record_context(record: logging.LogRecord) -> LogContext | None:
    ctx = getattr(record, "context", None)
    return ctx if isinstance(ctx, LogContext) else None


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, context fields inlined."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        ctx = _record_context(record)
        if ctx is not None:
            for key in ("component", "operation", "target"):
                if getattr(ctx, key):
                    log_data[key] = getattr(ctx, key)
            log_data.update(ctx.extra)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """``[component] (operation) <target> message key=value ...``"""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        ctx = _record_context(record)
        if ctx is None:
            return base

        parts = []
        if ctx.component:
            parts.append(f"[{ctx.component}]")
        if ctx.operation:
            parts.append(f"({ctx.operation})")
        if ctx.target:
            parts.append(f"<{ctx.target}>")
        parts.append(base)
        parts.extend(f"{k}={v}" for k, v in ctx.extra.items())
        return " ".join(parts)


class EngineLogger:
    """Context-carrying logger for engine components.

    ``with_*`` methods return new loggers sharing the same stdlib logger, so
    they are safe to derive per call.
    """

    def __init__(self, name: str, context: LogContext | None = None):
        self._logger = logging.getLogger(f"{ROOT_LOGGER}.{name}")
        self._context = context or LogContext(component=name)

    def with_operation(self, operation: str) -> "EngineLogger":
        return EngineLogger(self._context.component, replace(self._context, operation=operation))

    def with_target(self, target: str) -> "EngineLogger":
        """Create a logger bound to the type being decomposed."""
        return EngineLogger(self._context.component, replace(self._context, target=target))

    def debug(self, msg: str, **kwargs: Any) -> None:
        if not self._logger.isEnabledFor(logging.DEBUG):
            return
        context = self._context.with_extra(**kwargs) if kwargs else self._context
        self._logger.debug(msg, extra={"context": context})

    @contextmanager
    def timed(self, operation: str) -> Iterator[dict[str, Any]]:
        """Time the enclosed block and log ``<operation> completed`` on exit.

        Yields:
            Dict the block may fill with extra fields; ``elapsed_ms`` is
            set after completion
        """
        start = time.perf_counter()
        result: dict[str, Any] = {}
        try:
            yield result
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            result["elapsed_ms"] = elapsed_ms
            self.debug(f"{operation} completed", **{**result, "elapsed_ms": f"{elapsed_ms:.2f}"})


def get_logger(name: str) -> EngineLogger:
    """Get a logger for an engine component."""
    return EngineLogger(name)


def configure_logging(
    level: int = logging.INFO,
    log_format: LogFormat = LogFormat.TEXT,
) -> None:
    """Install a stderr handler on the ``lookup_engine`` logger.

    Args:
        level: Logging level
        log_format: Output format
    """
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    if log_format == LogFormat.JSON:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(TextFormatter("%(asctime)s %(levelname)s %(message)s"))

    root.addHandler(handler)
