"""Monitoring and observability package."""
from .health import HealthCheck, create_monitoring_router
from .logging import get_logger, setup_logging
from .metrics import metrics
from .tracing import get_trace_context, initialize_observability, instrument_app

__all__ = [
    "HealthCheck",
    "create_monitoring_router",
    "get_logger",
    "get_trace_context",
    "initialize_observability",
    "instrument_app",
    "metrics",
    "setup_logging",
]
