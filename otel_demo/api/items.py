"""
Items service: ``GET /api/v1/items/{itemId}``.
"""
from typing import Optional, Union

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse

from otel_demo.config import Settings, get_settings
from otel_demo.core.catalog import Catalog, create_item_catalog
from otel_demo.core.models import NotFound, OrderItem

from .app import create_service_app
from .schemas import ProblemDetail, not_found_response

router = APIRouter(prefix="/api/v1/items", tags=["items"])


@router.get(
    "/{item_id}",
    response_model=OrderItem,
    responses={404: {"model": ProblemDetail, "description": "Unknown item"}},
    summary="Find an item",
)
async def find_item(item_id: str, request: Request) -> Union[OrderItem, JSONResponse]:
    catalog: Catalog[OrderItem] = request.app.state.catalog
    result = await catalog.lookup(item_id)
    if isinstance(result, NotFound):
        return not_found_response(result, request.url.path)
    return result.value


def create_app(
    settings: Optional[Settings] = None,
    catalog: Optional[Catalog[OrderItem]] = None,
) -> FastAPI:
    """Create the items service application."""
    settings = settings or get_settings()
    app = create_service_app(
        "items",
        settings,
        description="In-memory item lookup with simulated latency",
    )
    app.state.catalog = catalog or create_item_catalog(settings.lookup_max_delay_ms)
    app.include_router(router)
    return app
