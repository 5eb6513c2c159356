"""
Structured logging configuration.

structlog events and plain stdlib records (uvicorn, OpenTelemetry, our own
``logging.getLogger`` users) go through the same JSON formatter on stdout.
Every line carries the service name, the application context and, while a
span is active, the OpenTelemetry trace_id/span_id so it can be joined with
its trace in the backend.
"""
import logging
import sys
from typing import Any

import structlog
from pythonjsonlogger import jsonlogger

from otel_demo.config import Settings, get_settings

from .tracing import get_trace_context


class CorrelationJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter that adds service, application and trace context.

    Fields bound through structlog (``request_id``, ``service``...) arrive as
    record extras and take precedence over the values added here.

    Args:
        service_name: Service identifier ("shop", "orders" or "items")
        settings: Application settings
    """

    def __init__(self, service_name: str, settings: Settings, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.context = {
            "service": service_name,
            "app_name": settings.app_name,
            "app_env": settings.app_env,
        }

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        # Request context bound in the current task, for stdlib records too
        for key, value in structlog.contextvars.get_contextvars().items():
            log_record.setdefault(key, value)
        for key, value in self.context.items():
            log_record.setdefault(key, value)
        log_record.update(get_trace_context())


def setup_logging(service_name: str, settings: Settings | None = None) -> None:
    """
    Configure structured logging with JSON formatter.

    Sets up:
    - structlog events handed to stdlib logging as message plus extras
    - One JSON handler on the root logger for every record
    - Service name bound to every event
    """
    settings = settings or get_settings()

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.render_to_log_kwargs,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(service=service_name)

    # Configure standard library logging
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.log_level))

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Add JSON handler for stdout
    json_handler = logging.StreamHandler(sys.stdout)
    formatter = CorrelationJsonFormatter(
        service_name,
        settings,
        "%(asctime)s %(levelname)s %(name)s %(message)s",
        rename_fields={
            "asctime": "@timestamp",
            "levelname": "level",
            "name": "logger",
        },
    )
    json_handler.setFormatter(formatter)
    root_logger.addHandler(json_handler)

    # Suppress noisy loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logger = structlog.get_logger(__name__)
    logger.info("logging_configured", log_level=settings.log_level)


def get_logger(name: str) -> Any:
    """
    Get a structured logger instance.

    Args:
        name: Logger name

    Returns:
        Any: Structured logger
    """
    return structlog.get_logger(name)
