"""
OpenTelemetry Setup

Installs OTLP trace and metric exporters for one process. Until
init_telemetry() runs, the OpenTelemetry API hands out proxy no-op tracers
and meters, so instrumented code works unconfigured. LENS_TELEMETRY_ENABLED=false
turns everything off, including the proxies.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

logger = logging.getLogger(__name__)

_FALSY = ("false", "0", "no", "off")


def _env_flag(name: str, default: bool = True) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() not in _FALSY


@dataclass
class TelemetryConfig:
    """
    Exporter settings, read from the environment by default.

    LENS_TRACING_ENABLED and LENS_METRICS_ENABLED switch the two signals
    independently; the endpoint is the standard OTEL_EXPORTER_OTLP_ENDPOINT.
    """

    service_name: str = "multiverse-lens"
    service_version: str = "0.1.0"
    environment: str = field(default_factory=lambda: os.getenv("LENS_ENV", "development"))
    otlp_endpoint: str = field(
        default_factory=lambda: os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4317")
    )
    otlp_insecure: bool = True
    tracing_enabled: bool = field(default_factory=lambda: _env_flag("LENS_TRACING_ENABLED"))
    metrics_enabled: bool = field(default_factory=lambda: _env_flag("LENS_METRICS_ENABLED"))
    metrics_export_interval_ms: int = 10000

    def resource(self) -> Resource:
        return Resource.create(
            {
                SERVICE_NAME: self.service_name,
                SERVICE_VERSION: self.service_version,
                "deployment.environment": self.environment,
            }
        )


@dataclass
class _TelemetryState:
    initialized: bool = False
    tracer_provider: TracerProvider | None = None
    meter_provider: MeterProvider | None = None

    @property
    def exporting(self) -> bool:
        return self.tracer_provider is not None or self.meter_provider is not None


_state = _TelemetryState()


def telemetry_enabled() -> bool:
    """False when LENS_TELEMETRY_ENABLED is set to a false value."""
    return _env_flag("LENS_TELEMETRY_ENABLED")


def _install_tracing(config: TelemetryConfig, resource: Resource) -> TracerProvider:
    provider = TracerProvider(resource=resource)
    exporter = OTLPSpanExporter(endpoint=config.otlp_endpoint, insecure=config.otlp_insecure)
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)
    return provider


def _install_metrics(config: TelemetryConfig, resource: Resource) -> MeterProvider:
    reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(endpoint=config.otlp_endpoint, insecure=config.otlp_insecure),
        export_interval_millis=config.metrics_export_interval_ms,
    )
    provider = MeterProvider(resource=resource, metric_readers=[reader])
    metrics.set_meter_provider(provider)
    return provider


def init_telemetry(
    service_name: str | None = None,
    otlp_endpoint: str | None = None,
    config: TelemetryConfig | None = None,
) -> bool:
    """
    Install exporters once per process.

    Args:
        service_name: Overrides the configured service name
        otlp_endpoint: Overrides the configured collector endpoint
        config: Full configuration (read from the environment if None)

    Returns:
        True if at least one exporter is installed
    """
    if _state.initialized:
        return _state.exporting
    _state.initialized = True

    if not telemetry_enabled():
        logger.debug("Telemetry disabled via LENS_TELEMETRY_ENABLED")
        return False

    config = config or TelemetryConfig()
    if service_name:
        config.service_name = service_name
    if otlp_endpoint:
        config.otlp_endpoint = otlp_endpoint

    resource = config.resource()
    try:
        if config.tracing_enabled:
            _state.tracer_provider = _install_tracing(config, resource)
        if config.metrics_enabled:
            _state.meter_provider = _install_metrics(config, resource)
    except Exception as e:
        # The CLI works without a collector; a broken exporter only costs telemetry
        logger.error(f"Failed to initialize telemetry: {e}")
        return _state.exporting

    if _state.exporting:
        logger.info(f"Telemetry for {config.service_name} exporting to {config.otlp_endpoint}")
    return _state.exporting


def shutdown_telemetry() -> None:
    """Flush and shut down the installed providers. init_telemetry() may run again afterwards."""
    global _state

    for provider in (_state.meter_provider, _state.tracer_provider):
        if provider is None:
            continue
        try:
            provider.force_flush(timeout_millis=5000)
            provider.shutdown()
        except Exception as e:
            logger.warning(f"Error during telemetry shutdown: {e}")
    _state = _TelemetryState()


def get_tracer(name: str = "multiverse-lens") -> Any:
    """Tracer for ``name``, or the API's NoOpTracer when telemetry is disabled."""
    if not telemetry_enabled():
        return trace.NoOpTracer()
    return trace.get_tracer(name)


def get_meter(name: str = "multiverse-lens") -> Any:
    """Meter for ``name``, or the API's NoOpMeter when telemetry is disabled."""
    if not telemetry_enabled():
        return metrics.NoOpMeter(name)
    return metrics.get_meter(name)
