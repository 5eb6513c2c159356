"""
Shop service: ``GET /`` renders the index page from orders and items.
"""
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

import httpx
import structlog
from fastapi import APIRouter, FastAPI, Request

from otel_demo.config import Settings, get_settings
from otel_demo.core.models import IndexPage
from otel_demo.core.shop import ShopService
from otel_demo.integrations.service_clients import create_service_clients

from .app import create_service_app

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["shop"])


@router.get("/", response_model=IndexPage, summary="Shop index page")
async def index(request: Request) -> IndexPage:
    shop: ShopService = request.app.state.shop
    return await shop.build_index()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, Any]:
    """Close the outbound clients on shutdown."""
    shop: ShopService = app.state.shop
    logger.info(
        "application_startup",
        orders_url=shop.orders.base_url,
        items_url=shop.items.base_url,
    )

    yield

    await shop.orders.aclose()
    await shop.items.aclose()
    logger.info("application_shutdown")


def create_app(
    settings: Optional[Settings] = None,
    orders_transport: Optional[httpx.AsyncBaseTransport] = None,
    items_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Create the shop service application.

    The transports default to real network connections; tests pass
    transports that route to in-process apps.
    """
    settings = settings or get_settings()
    app = create_service_app(
        "shop",
        settings,
        description="Index page aggregating the orders and items services",
        lifespan=lifespan,
    )

    orders, items = create_service_clients(
        settings,
        user_agent="shop",
        orders_transport=orders_transport,
        items_transport=items_transport,
    )
    app.state.shop = ShopService(settings.app_title, orders, items)
    app.include_router(router)
    return app
