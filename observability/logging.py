"""
devrestart - Structured Logging with Trace Context

Integrates structlog with OpenTelemetry trace context propagation so the
restart decisions logged during startup can be correlated with the
lifecycle delivery spans.

Usage:
    from observability.logging import setup_logging, get_logger

    setup_logging(LoggingConfig(level="INFO", json_format=False))

    logger = get_logger(__name__)
    logger.info("Restart disabled", variable="DEVRESTART_RESTART_ENABLED")
"""
from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

import structlog
from opentelemetry import trace
from structlog.types import EventDict, WrappedLogger

# Global state
_configured: bool = False


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    service_name: str = "devrestart"
    level: str = field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper()
    )
    json_format: bool = field(
        default_factory=lambda: os.getenv("LOG_FORMAT", "console").lower() == "json"
    )
    enable_trace_context: bool = True
    cache_loggers: bool = True
    environment: str = field(
        default_factory=lambda: os.getenv("ENVIRONMENT", "development")
    )


def add_trace_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Structlog processor that adds the current span's ids to log events."""
    span = trace.get_current_span()
    if span and span.is_recording():
        ctx = span.get_span_context()
        if ctx.is_valid:
            event_dict["trace_id"] = format(ctx.trace_id, "032x")
            event_dict["span_id"] = format(ctx.span_id, "016x")
    return event_dict


def add_service_context(
    service_name: str,
    environment: str,
) -> structlog.types.Processor:
    """Create a processor that adds service context to all log events."""

    def processor(
        logger: WrappedLogger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        event_dict["service"] = service_name
        event_dict["environment"] = environment
        return event_dict

    return processor


def add_timestamp(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Add ISO8601 timestamp."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def setup_logging(config: Optional[LoggingConfig] = None) -> None:
    """
    Configure structlog and the stdlib root logger.

    An explicit ``config`` always (re)configures. Without one, the
    environment defaults are applied only if nothing has configured
    logging yet, which is what ``get_logger`` relies on.
    """
    global _configured

    if _configured and config is None:
        return

    config = config or LoggingConfig()

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_service_context(config.service_name, config.environment),
        add_timestamp,
    ]

    if config.enable_trace_context:
        processors.append(add_trace_context)

    processors.extend([
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ])

    if config.json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=config.cache_loggers,
    )

    _configure_stdlib_logging(config)

    _configured = True


def _configure_stdlib_logging(config: LoggingConfig) -> None:
    """Route stdlib records to stderr at the configured level."""
    level = getattr(logging, config.level, logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    logging.getLogger("opentelemetry").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structlog logger instance.

    Args:
        name: Logger name, typically a dotted ``devrestart.*`` name

    Example:
        >>> logger = get_logger("devrestart.router")
        >>> logger.info("Restart initialized", strategy="default")
    """
    if not _configured:
        setup_logging()

    return structlog.get_logger(name)


def shutdown_logging() -> None:
    """Flush handlers and allow ``setup_logging`` to run again."""
    global _configured

    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        handler.flush()
        handler.close()

    _configured = False


class LogContext:
    """
    Context manager for adding contextual information to all logs.

    Example:
        >>> with LogContext(phase="starting"):
        ...     logger.info("Dispatching")
    """

    def __init__(self, **kwargs: Any):
        self.context = kwargs

    def __enter__(self) -> "LogContext":
        structlog.contextvars.bind_contextvars(**self.context)
        return self

    def __exit__(self, *args: Any) -> None:
        structlog.contextvars.unbind_contextvars(*self.context.keys())


def bind_context(**kwargs: Any) -> None:
    """Bind contextual variables to all subsequent log messages."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound contextual variables."""
    structlog.contextvars.clear_contextvars()
