"""
FastAPI application shell shared by the shop, orders and items services.

Every service gets:
- Request ID tracking and request logging
- A problem-details 500 for unhandled exceptions
- /health/live, /health/ready and /metrics
- OpenTelemetry export and server spans when telemetry is enabled
"""
import time
import uuid
from typing import Any, Callable, Optional

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse

from otel_demo import __version__
from otel_demo.config import Settings
from otel_demo.monitoring import (
    HealthCheck,
    create_monitoring_router,
    initialize_observability,
    instrument_app,
    setup_logging,
)

from .schemas import ProblemDetail

logger = structlog.get_logger(__name__)


def create_service_app(
    service_name: str,
    settings: Settings,
    description: str,
    lifespan: Optional[Callable[[FastAPI], Any]] = None,
) -> FastAPI:
    """
    Create the FastAPI application for ``service_name``.

    Logging and telemetry are configured here, before any route runs, so
    the first request is already correlated and exported.
    """
    setup_logging(service_name, settings)
    initialize_observability(service_name, settings)

    app = FastAPI(
        title=f"{settings.app_name} {service_name}",
        description=description,
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.service_name = service_name

    @app.middleware("http")
    async def add_request_id_middleware(request: Request, call_next: Any) -> Response:
        """
        Add request ID to all requests for tracing.

        Also adds timing information and structured logging context.
        """
        request_id = str(uuid.uuid4())
        start_time = time.time()

        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        logger.info(
            "request_started",
            client_host=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)

            response.headers["X-Request-ID"] = request_id

            logger.info(
                "request_completed",
                status_code=response.status_code,
                duration_seconds=time.time() - start_time,
            )

            return response

        except Exception as e:
            logger.error(
                "request_failed",
                error=str(e),
                duration_seconds=time.time() - start_time,
            )
            raise

        finally:
            structlog.contextvars.unbind_contextvars("request_id", "method", "path")

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Global exception handler for unhandled exceptions.
        """
        logger.error(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
        )

        return ProblemDetail(
            title="Internal Server Error",
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            instance=request.url.path,
        ).to_response()

    app.include_router(create_monitoring_router(HealthCheck(service_name)))
    instrument_app(app, settings)

    return app
