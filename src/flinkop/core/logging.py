"""Structured logging infrastructure for flinkop.

Provides structured logging using structlog with reconciliation-specific
context such as the application name, namespace and reconcile pass id.
Supports console and JSON output, optionally to a rotating file.

Example usage:
    from flinkop.core.logging import get_logger, configure_logging, with_context

    # Configure once at startup
    configure_logging(level="DEBUG", format="console")

    # Get a component-specific logger
    logger = get_logger("retry_policy")

    # Log with auto-context
    logger.info("retry_scheduled", attempt=3)

    # Bind context for a scope
    ctx = ReconcileContext(application="wordcount", namespace="flink")
    with with_context(ctx):
        logger.info("reconcile_started")  # Includes application, namespace
"""

from __future__ import annotations

import logging
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Literal

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

# Sensitive field patterns that should never be logged
SENSITIVE_PATTERNS = frozenset({
    "api_key",
    "apikey",
    "token",
    "secret",
    "password",
    "credential",
    "authorization",
    "bearer",
})


@dataclass(frozen=True)
class ReconcileContext:
    """Immutable context for correlating log entries across a reconcile pass.

    Attributes:
        application: Name of the Flink application resource being reconciled.
        namespace: Kubernetes namespace of the resource.
        reconcile_id: Unique id of this reconcile pass (UUID).
        component: Component name for the current operation.
    """

    application: str
    namespace: str | None = None
    reconcile_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    component: str = "unknown"

    def with_component(self, component: str) -> ReconcileContext:
        """Create a new context with the specified component."""
        return ReconcileContext(
            application=self.application,
            namespace=self.namespace,
            reconcile_id=self.reconcile_id,
            component=component,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging (excludes None values)."""
        result: dict[str, Any] = {
            "application": self.application,
            "reconcile_id": self.reconcile_id,
            "component": self.component,
        }
        if self.namespace is not None:
            result["namespace"] = self.namespace
        return result


# ContextVar keeps concurrent reconcile workers isolated
_current_context: ContextVar[ReconcileContext | None] = ContextVar(
    "flinkop_context", default=None
)


def get_current_context() -> ReconcileContext | None:
    """Get the current ReconcileContext if set."""
    return _current_context.get()


@contextmanager
def with_context(ctx: ReconcileContext) -> Iterator[ReconcileContext]:
    """Context manager that sets ReconcileContext for the duration of a block.

    All log calls within the block include the context fields when the
    ``_add_context`` processor is active.

    Args:
        ctx: The ReconcileContext to use for the block.

    Yields:
        The ReconcileContext that was set.
    """
    token = _current_context.set(ctx)
    try:
        yield ctx
    finally:
        _current_context.reset(token)


def _sanitize_value(key: str, value: Any) -> Any:
    """Return "[REDACTED]" for sensitive keys, otherwise the value unchanged."""
    key_lower = key.lower()
    for pattern in SENSITIVE_PATTERNS:
        if pattern in key_lower:
            return "[REDACTED]"
    return value


def _sanitize_event_dict(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Structlog processor that sanitizes sensitive fields.

    Args:
        logger: The wrapped logger object.
        method_name: The name of the method called on the logger.
        event_dict: The event dict containing all bound and event data.

    Returns:
        Sanitized event dict with sensitive values redacted.
    """
    sanitized: EventDict = {}
    for key, value in event_dict.items():
        if isinstance(value, dict):
            sanitized[key] = {
                k: _sanitize_value(k, v) for k, v in value.items()
            }
        else:
            sanitized[key] = _sanitize_value(key, value)
    return sanitized


def _add_timestamp(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Structlog processor that adds ISO8601 UTC timestamp."""
    event_dict["timestamp"] = datetime.now(UTC).isoformat()
    return event_dict


def _add_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Structlog processor that adds ReconcileContext fields to log entries.

    Explicitly bound keys take precedence over context fields.
    """
    ctx = get_current_context()
    if ctx is not None:
        for key, value in ctx.to_dict().items():
            if key not in event_dict:
                event_dict[key] = value
    return event_dict


class FlinkOpLogger:
    """Logger wrapper around structlog bound to a component name.

    The underlying structlog logger is fetched on every call, so loggers
    created at import time still respect a later configure_logging().
    """

    def __init__(self, component: str, **initial_context: Any) -> None:
        self._component = component
        self._context: dict[str, Any] = {"component": component, **initial_context}

    def _get_logger(self) -> structlog.stdlib.BoundLogger:
        logger: structlog.stdlib.BoundLogger = structlog.get_logger().bind(**self._context)
        return logger

    def bind(self, **context: Any) -> FlinkOpLogger:
        """Create a new logger with additional bound context."""
        new_logger = FlinkOpLogger.__new__(FlinkOpLogger)
        new_logger._component = self._component
        new_logger._context = {**self._context, **context}
        return new_logger

    def unbind(self, *keys: str) -> FlinkOpLogger:
        """Create a new logger with specified keys removed."""
        new_logger = FlinkOpLogger.__new__(FlinkOpLogger)
        new_logger._component = self._component
        new_logger._context = {k: v for k, v in self._context.items() if k not in keys}
        return new_logger

    def debug(self, event: str, **kw: Any) -> None:
        self._get_logger().debug(event, **kw)

    def info(self, event: str, **kw: Any) -> None:
        self._get_logger().info(event, **kw)

    def warning(self, event: str, **kw: Any) -> None:
        self._get_logger().warning(event, **kw)

    def error(self, event: str, **kw: Any) -> None:
        self._get_logger().error(event, **kw)

    def exception(self, event: str, **kw: Any) -> None:
        """Log an exception with traceback; call from inside an exception handler."""
        self._get_logger().exception(event, **kw)


def _get_processors(
    format: Literal["json", "console"],  # noqa: A002
    include_timestamps: bool,
    include_context: bool,
) -> list[Processor]:
    """Get the structlog processor chain for the given output format."""
    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        _sanitize_event_dict,
    ]

    if include_context:
        processors.append(_add_context)

    if include_timestamps:
        processors.append(_add_timestamp)

    renderer: Processor
    if format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    processors.extend([
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ])

    return processors


def configure_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO",
    format: Literal["json", "console"] = "console",  # noqa: A002
    file_path: Path | None = None,
    max_file_size_mb: int = 50,
    backup_count: int = 5,
    include_timestamps: bool = True,
    include_context: bool = True,
) -> None:
    """Configure flinkop structured logging.

    Call once at process startup, before the first reconcile pass.

    Args:
        level: Minimum log level to capture.
        format: "json" for structured output, "console" for human-readable.
        file_path: Optional rotating log file. Without it, console output goes
            to stderr and JSON output to stdout.
        max_file_size_mb: Maximum log file size before rotation (MB).
        backup_count: Number of rotated log files to keep.
        include_timestamps: Whether to include ISO8601 timestamps.
        include_context: Whether to merge the active ReconcileContext.
    """
    log_level = getattr(logging, level)

    handler: logging.Handler
    if file_path is not None:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            file_path,
            maxBytes=max_file_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8",
        )
    elif format == "json":
        handler = logging.StreamHandler(sys.stdout)
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    # cache_logger_on_first_use=False keeps import-time loggers in sync with runtime config
    structlog.configure(
        processors=_get_processors(format, include_timestamps, include_context),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(component: str, **initial_context: Any) -> FlinkOpLogger:
    """Get a flinkop logger for a component.

    Args:
        component: The component name (e.g., "retry_policy", "classifier").
        **initial_context: Additional context to bind.

    Returns:
        A FlinkOpLogger instance bound to the component.
    """
    return FlinkOpLogger(component, **initial_context)


__all__ = [
    "FlinkOpLogger",
    "ReconcileContext",
    "SENSITIVE_PATTERNS",
    "configure_logging",
    "get_current_context",
    "get_logger",
    "with_context",
]
