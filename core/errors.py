"""
devrestart - Errors

Every error raised by the restart subsystem derives from DevRestartError.
A new error marks the active span as failed, so coordinator and dispatch
failures show up on the lifecycle delivery span that triggered them.
"""

from __future__ import annotations

import traceback
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode


class ErrorSeverity(Enum):
    """How urgently an error needs attention."""

    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass
class ErrorContext:
    """Where an error happened, plus the span it happened in."""

    operation: str
    component: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    trace_id: Optional[str] = None
    span_id: Optional[str] = None
    phase: Optional[str] = None
    listener: Optional[str] = None
    stack_trace: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data

    @classmethod
    def from_current_span(
        cls,
        operation: str,
        component: str,
        **kwargs: Any
    ) -> "ErrorContext":
        """Build a context carrying the active span ids and the exception being handled."""
        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            kwargs.setdefault("trace_id", format(span_context.trace_id, "032x"))
            kwargs.setdefault("span_id", format(span_context.span_id, "016x"))
        return cls(
            operation=operation,
            component=component,
            stack_trace=traceback.format_exc(),
            **kwargs,
        )


class DevRestartError(Exception):
    """
    Base exception for the restart subsystem.

    Subclasses set ``error_code`` and, where it differs from ERROR,
    ``default_severity``.
    """

    default_severity: ErrorSeverity = ErrorSeverity.ERROR
    error_code: str = "DEVRESTART_ERROR"

    def __init__(
        self,
        message: str,
        context: Optional[ErrorContext] = None,
        severity: Optional[ErrorSeverity] = None,
        cause: Optional[BaseException] = None,
        suggestions: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context
        self.severity = severity or self.default_severity
        self.cause = cause
        self.suggestions = suggestions or []
        self.timestamp = datetime.now(timezone.utc)

        self._record_to_span()

    def _record_to_span(self) -> None:
        span = trace.get_current_span()
        if span.is_recording():
            span.set_status(Status(StatusCode.ERROR, self.message))
            span.record_exception(self)
            span.set_attribute("error.code", self.error_code)
            span.set_attribute("error.severity", self.severity.value)
            if self.context:
                span.set_attribute("error.component", self.context.component)
                span.set_attribute("error.operation", self.context.operation)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "severity": self.severity.value,
            "suggestions": self.suggestions,
            "timestamp": self.timestamp.isoformat(),
            "context": self.context.to_dict() if self.context else None,
            "cause": str(self.cause) if self.cause else None,
        }

    def __str__(self) -> str:
        parts = [f"[{self.error_code}] {self.message}"]
        if self.context:
            parts.append(f" (component: {self.context.component})")
        if self.cause:
            parts.append(f" [caused by: {self.cause}]")
        return "".join(parts)


class ConfigurationError(DevRestartError):
    """Invalid structured configuration."""

    error_code = "CONFIG_ERROR"
    default_severity = ErrorSeverity.CRITICAL

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        actual_value: Any = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.config_key = config_key
        self.actual_value = actual_value


class RestartError(DevRestartError):
    """Failure inside the restart subsystem."""

    error_code = "RESTART_ERROR"


class RestartStateError(RestartError):
    """A coordinator transition that is not allowed from its current state."""

    error_code = "RESTART_STATE_ERROR"

    def __init__(self, message: str, current: str, attempted: str, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.current = current
        self.attempted = attempted


class LifecycleDispatchError(DevRestartError):
    """A lifecycle listener failed while the host was delivering a phase."""

    error_code = "LIFECYCLE_DISPATCH_ERROR"
    default_severity = ErrorSeverity.CRITICAL

    def __init__(
        self,
        message: str,
        phase: Optional[str] = None,
        listener: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.phase = phase
        self.listener = listener
