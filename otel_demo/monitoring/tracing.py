"""
OpenTelemetry Instrumentation Setup

Initializes tracing and metrics export for the demo services:
- FastAPI (HTTP server spans)
- httpx (outbound call spans from the shop, with trace context propagation)
- OTLP export to the collector sidecar running next to each service

The collector receives OTLP over gRPC on localhost and forwards to the
observability backend (Wavefront/Aria or Grafana Cloud). If the collector is
not running, the batch processors drop data after their export timeout and
the services keep serving requests.
"""

import logging
from typing import Optional

from fastapi import FastAPI
from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import (
    DEPLOYMENT_ENVIRONMENT,
    SERVICE_NAME,
    SERVICE_VERSION,
    Resource,
)
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased

from otel_demo import __version__
from otel_demo.config import Settings

logger = logging.getLogger(__name__)

# Providers can only be installed once per process.
_initialized = False


def create_resource(service_name: str, settings: Settings) -> Resource:
    """
    Creates an OpenTelemetry Resource with service metadata.

    Resource attributes are attached to every span and metric exported by
    this process. The ``application`` attribute groups the three services
    together in the backend, the same key the collector's resource
    processor upserts.

    Args:
        service_name: Service identifier ("shop", "orders" or "items")
        settings: Application settings

    Returns:
        OpenTelemetry Resource object
    """
    return Resource(attributes={
        SERVICE_NAME: service_name,
        SERVICE_VERSION: __version__,
        DEPLOYMENT_ENVIRONMENT: settings.app_env,
        "application": settings.app_name,
    })


def setup_tracing(service_name: str, settings: Settings) -> trace.Tracer:
    """
    Initializes distributed tracing with OpenTelemetry.

    Spans are buffered by a BatchSpanProcessor and pushed to the collector
    sidecar over OTLP/gRPC. Sampling is parent-based so the shop's decision
    is honored by orders and items for the same request.

    Args:
        service_name: Service identifier
        settings: Application settings (endpoint, sample rate)

    Returns:
        Configured Tracer instance
    """
    resource = create_resource(service_name, settings)
    sampler = ParentBased(root=TraceIdRatioBased(settings.trace_sample_rate))
    provider = TracerProvider(resource=resource, sampler=sampler)

    otlp_exporter = OTLPSpanExporter(endpoint=settings.otlp_endpoint, insecure=True)
    provider.add_span_processor(BatchSpanProcessor(otlp_exporter))
    logger.info("Tracing initialized: %s -> %s", service_name, settings.otlp_endpoint)

    trace.set_tracer_provider(provider)

    # Outbound spans for the shop's calls, with traceparent injection
    HTTPXClientInstrumentor().instrument()

    return trace.get_tracer(__name__)


def setup_metrics(service_name: str, settings: Settings) -> metrics.Meter:
    """
    Initializes OTLP metrics export.

    OpenTelemetry pushes metrics to the collector every
    ``metrics_export_interval_ms``; the Prometheus collectors in
    :mod:`otel_demo.monitoring.metrics` are additionally scraped from
    ``/metrics``.

    Args:
        service_name: Service identifier
        settings: Application settings

    Returns:
        Configured Meter instance
    """
    resource = create_resource(service_name, settings)

    otlp_exporter = OTLPMetricExporter(endpoint=settings.otlp_endpoint, insecure=True)
    reader = PeriodicExportingMetricReader(
        otlp_exporter, export_interval_millis=settings.metrics_export_interval_ms
    )
    provider = MeterProvider(resource=resource, metric_readers=[reader])
    metrics.set_meter_provider(provider)
    logger.info("Metrics initialized: %s -> %s", service_name, settings.otlp_endpoint)

    return metrics.get_meter(__name__)


def get_trace_context() -> dict:
    """
    Extract current trace ID and span ID for correlation.

    Returns:
        Dict with trace_id and span_id (or empty if no active trace)
    """
    span = trace.get_current_span()
    ctx = span.get_span_context()

    if ctx.is_valid:
        return {
            "trace_id": format(ctx.trace_id, "032x"),
            "span_id": format(ctx.span_id, "016x"),
        }
    return {}


def initialize_observability(service_name: str, settings: Settings) -> bool:
    """
    One-call setup for tracing and metrics export.

    Does nothing when telemetry is disabled or the providers were already
    installed by an earlier call in this process.

    Returns:
        True if the providers were installed by this call
    """
    global _initialized

    if not settings.telemetry_enabled:
        logger.info("Telemetry disabled for %s", service_name)
        return False
    if _initialized:
        return False

    setup_tracing(service_name, settings)
    setup_metrics(service_name, settings)
    _initialized = True

    logger.info("Observability initialized for %s", service_name)
    return True


def instrument_app(app: FastAPI, settings: Settings, excluded_urls: Optional[str] = None) -> None:
    """Add FastAPI server spans to ``app`` when telemetry is enabled."""
    if not settings.telemetry_enabled:
        return
    FastAPIInstrumentor.instrument_app(
        app, excluded_urls=excluded_urls or "health/live,health/ready,metrics"
    )
