"""
devrestart - Observability Package

Structured logging and tracing for the restart subsystem.

Components:
- logging: structlog integration with trace context propagation
- tracing: OpenTelemetry tracer provider and span helpers

Usage:
    from observability import setup_observability, get_logger

    setup_observability()
    logger = get_logger("devrestart.app")
"""
from typing import Optional

from .logging import (
    LogContext,
    LoggingConfig,
    bind_context,
    clear_context,
    get_logger,
    setup_logging,
    shutdown_logging,
)
from .tracing import (
    TracingConfig,
    create_span,
    get_tracer,
    setup_tracing,
    shutdown_tracing,
)


def setup_observability(
    logging_config: Optional[LoggingConfig] = None,
    tracing_config: Optional[TracingConfig] = None,
) -> None:
    """Initialize tracing first so log events can pick up span ids."""
    setup_tracing(tracing_config)
    setup_logging(logging_config)


def shutdown_observability() -> None:
    shutdown_tracing()
    shutdown_logging()


__all__ = [
    "LogContext",
    "LoggingConfig",
    "TracingConfig",
    "bind_context",
    "clear_context",
    "create_span",
    "get_logger",
    "get_tracer",
    "setup_logging",
    "setup_observability",
    "setup_tracing",
    "shutdown_logging",
    "shutdown_observability",
    "shutdown_tracing",
]
