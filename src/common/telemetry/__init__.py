"""
Telemetry Module

Centralized OpenTelemetry instrumentation:
- Request tracing (spans)
- Metrics (search requests, extraction tiers)

Usage:
    from src.common.telemetry import init_telemetry, get_tracer

    init_telemetry(service_name="multiverse-lens")

    tracer = get_tracer(__name__)
    with tracer.start_as_current_span("search.semantic") as span:
        span.set_attribute("search.limit", limit)
        ...
"""

from src.common.telemetry.metrics import LensMetrics, get_lens_metrics
from src.common.telemetry.setup import (
    TelemetryConfig,
    get_meter,
    get_tracer,
    init_telemetry,
    shutdown_telemetry,
)
from src.common.telemetry.tracing import (
    record_exception,
    trace_async,
)

__all__ = [
    # Setup
    "init_telemetry",
    "shutdown_telemetry",
    "get_tracer",
    "get_meter",
    "TelemetryConfig",
    # Metrics
    "LensMetrics",
    "get_lens_metrics",
    # Tracing
    "trace_async",
    "record_exception",
]
