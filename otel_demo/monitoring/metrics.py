"""
Metrics for the demo services.

Tracks:
- Hits per page (index, orders, items)
- Injected lookup delays
- Shop outbound call durations and failures

Each hit is recorded twice: on the OpenTelemetry ``hit.counter`` pushed to
the collector sidecar, and on a Prometheus counter scraped from /metrics.
"""
from opentelemetry import metrics as otel_metrics
from prometheus_client import Counter, Histogram

# Page hit metrics
hit_counter_hits_total = Counter(
    "hit_counter_hits",
    "Hit counter",
    ["page"],  # index, orders, items
)

# Lookup metrics
lookup_delay_seconds = Histogram(
    "lookup_delay_seconds",
    "Artificial delay injected into lookups in seconds",
    ["page"],
    buckets=(0.05, 0.1, 0.25, 0.5, 0.75, 1.0),
)

# Outbound call metrics
remote_call_duration_seconds = Histogram(
    "remote_call_duration_seconds",
    "Shop outbound call duration in seconds",
    ["service", "outcome"],  # outcome: found, not_found, failed
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0),
)

remote_call_failures_total = Counter(
    "remote_call_failures_total",
    "Shop outbound calls whose result was dropped",
    ["service", "reason"],  # reason: not_found, failed
)

# Resolved through the global proxy, so it follows the provider installed
# by initialize_observability() and is a no-op until then.
_meter = otel_metrics.get_meter("otel_demo")

hit_counter = _meter.create_counter(
    "hit.counter",
    unit="hits",
    description="Hit counter",
)


class MetricsCollector:
    """Helper class for collecting metrics."""

    @staticmethod
    def record_hit(page: str) -> None:
        """Record one hit on ``page``."""
        hit_counter.add(1, {"page": page})
        hit_counter_hits_total.labels(page=page).inc()

    @staticmethod
    def record_lookup_delay(page: str, delay_seconds: float) -> None:
        """Record an injected lookup delay."""
        lookup_delay_seconds.labels(page=page).observe(delay_seconds)

    @staticmethod
    def record_remote_call(service: str, outcome: str, duration_seconds: float) -> None:
        """Record an outbound call and, unless it found something, a failure."""
        remote_call_duration_seconds.labels(service=service, outcome=outcome).observe(
            duration_seconds
        )
        if outcome != "found":
            remote_call_failures_total.labels(service=service, reason=outcome).inc()


# Export singleton instance
metrics = MetricsCollector()
