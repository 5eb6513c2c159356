"""
OpenTelemetry Shop Demo

Three small FastAPI services (shop, orders, items) instrumented with
OpenTelemetry so traces and metrics flow to a collector sidecar:
1. orders / items: static lookup tables with an injected random delay
2. shop: index page built from sequential calls to orders and items
3. telemetry: OTLP export, Prometheus /metrics, JSON logs with trace ids
"""

__version__ = "1.0.0"
