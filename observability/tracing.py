"""
devrestart - Tracing with OpenTelemetry

Sets up the tracer provider used to record one span per lifecycle delivery,
so a slow or failing listener shows up next to the rest of the startup trace.

Usage:
    from observability.tracing import setup_tracing, create_span

    setup_tracing(TracingConfig(console_export=True))

    with create_span("lifecycle.deliver", attributes={"lifecycle.phase": "starting"}):
        ...
"""
from __future__ import annotations

import os
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource, SERVICE_NAME, SERVICE_VERSION
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor
from opentelemetry.sdk.trace.sampling import (
    ALWAYS_OFF,
    ALWAYS_ON,
    ParentBased,
    TraceIdRatioBased,
)

_tracer_provider: Optional[trace.TracerProvider] = None
_initialized: bool = False


@dataclass
class TracingConfig:
    """Configuration for OpenTelemetry tracing."""

    service_name: str = "devrestart"
    service_version: str = "0.3.0"
    enabled: bool = field(
        default_factory=lambda: os.getenv("OTEL_TRACING_ENABLED", "true").lower() == "true"
    )
    sample_rate: float = field(
        default_factory=lambda: float(os.getenv("OTEL_TRACES_SAMPLER_ARG", "1.0"))
    )
    console_export: bool = field(
        default_factory=lambda: os.getenv("OTEL_CONSOLE_EXPORT", "false").lower() == "true"
    )
    environment: str = field(
        default_factory=lambda: os.getenv("ENVIRONMENT", "development")
    )


def setup_tracing(config: Optional[TracingConfig] = None) -> trace.TracerProvider:
    """Install the process tracer provider once; later calls return it."""
    global _tracer_provider, _initialized

    if _initialized and _tracer_provider:
        return _tracer_provider

    config = config or TracingConfig()

    if not config.enabled:
        _tracer_provider = trace.NoOpTracerProvider()
        _initialized = True
        return _tracer_provider

    resource = Resource.create({
        SERVICE_NAME: config.service_name,
        SERVICE_VERSION: config.service_version,
        "deployment.environment": config.environment,
    })

    if config.sample_rate <= 0.0:
        sampler = ALWAYS_OFF
    elif config.sample_rate >= 1.0:
        sampler = ALWAYS_ON
    else:
        sampler = ParentBased(root=TraceIdRatioBased(config.sample_rate))

    provider = TracerProvider(resource=resource, sampler=sampler)

    if config.console_export:
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    _tracer_provider = provider
    _initialized = True

    return provider


def get_tracer(name: str) -> trace.Tracer:
    """Tracer from the configured provider; sets up defaults on first use."""
    if not _initialized:
        setup_tracing()
    provider = _tracer_provider or trace.get_tracer_provider()
    return provider.get_tracer(name)


def shutdown_tracing() -> None:
    """Flush pending spans and forget the configured provider."""
    global _tracer_provider, _initialized
    if _tracer_provider is not None and hasattr(_tracer_provider, "shutdown"):
        _tracer_provider.shutdown()
    _initialized = False
    _tracer_provider = None


@contextmanager
def create_span(
    name: str,
    attributes: Optional[Dict[str, Any]] = None,
    tracer_name: str = "devrestart.observability",
) -> Iterator[trace.Span]:
    """Start a current span; an escaping exception marks it as failed."""
    tracer = get_tracer(tracer_name)
    with tracer.start_as_current_span(name, attributes=attributes) as span:
        yield span
