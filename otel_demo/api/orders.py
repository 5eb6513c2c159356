"""
Orders service: ``GET /api/v1/orders/{orderId}``.
"""
from typing import Optional, Union

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse

from otel_demo.config import Settings, get_settings
from otel_demo.core.catalog import Catalog, create_order_catalog
from otel_demo.core.models import NotFound, Order

from .app import create_service_app
from .schemas import ProblemDetail, not_found_response

router = APIRouter(prefix="/api/v1/orders", tags=["orders"])


@router.get(
    "/{order_id}",
    response_model=Order,
    responses={404: {"model": ProblemDetail, "description": "Unknown order"}},
    summary="Find an order",
)
async def find_order(order_id: str, request: Request) -> Union[Order, JSONResponse]:
    catalog: Catalog[Order] = request.app.state.catalog
    result = await catalog.lookup(order_id)
    if isinstance(result, NotFound):
        return not_found_response(result, request.url.path)
    return result.value


def create_app(
    settings: Optional[Settings] = None,
    catalog: Optional[Catalog[Order]] = None,
) -> FastAPI:
    """Create the orders service application."""
    settings = settings or get_settings()
    app = create_service_app(
        "orders",
        settings,
        description="In-memory order lookup with simulated latency",
    )
    app.state.catalog = catalog or create_order_catalog(settings.lookup_max_delay_ms)
    app.include_router(router)
    return app
