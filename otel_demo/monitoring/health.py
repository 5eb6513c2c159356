"""
Health check and metrics endpoints for Kubernetes probes and Prometheus.
"""
from typing import Any, Dict

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest


class HealthCheck:
    """
    Health check service for one demo service.

    The services hold no connections of their own (the shop's clients are
    created per process and connect lazily), so readiness only reports that
    the application object is up.
    """

    def __init__(self, service_name: str) -> None:
        self.service_name = service_name

    async def liveness(self) -> Dict[str, Any]:
        """
        Liveness probe.

        Simple check that the application is running.
        """
        return {"status": "alive", "service": self.service_name}

    async def readiness(self) -> Dict[str, Any]:
        """Readiness probe."""
        return {"status": "ready", "service": self.service_name}


def create_monitoring_router(health_check: HealthCheck) -> APIRouter:
    """Build the /health/* and /metrics routes for ``health_check``."""
    router = APIRouter(tags=["monitoring"])

    @router.get("/health/live", summary="Liveness probe")
    async def liveness() -> Dict[str, Any]:
        return await health_check.liveness()

    @router.get("/health/ready", summary="Readiness probe")
    async def readiness() -> Dict[str, Any]:
        return await health_check.readiness()

    @router.get("/metrics", summary="Prometheus metrics")
    async def prometheus_metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return router
