"""
HTTP clients for the orders and items services.

Implements:
- One httpx.AsyncClient per remote service, created with the application
- 30 second connect timeout, no read timeout, redirects followed
- User-Agent set to the calling service name
- Typed results instead of exceptions: Found, NotFound (404) or CallFailed

No retries: a failed call is reported once and the caller decides.
"""
import time
from typing import Optional, Type, TypeVar

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from otel_demo.config import Settings
from otel_demo.core.models import CallFailed, CallResult, Found, NotFound, Order, OrderItem
from otel_demo.monitoring.metrics import metrics

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ServiceClient:
    """
    Base client for a lookup service.

    Args:
        service: Name of the remote service, used in logs and metrics
        base_url: Base URL of the remote service
        user_agent: Value of the User-Agent header
        connect_timeout: Connect timeout in seconds
        transport: Optional httpx transport (tests mount the apps directly)
    """

    def __init__(
        self,
        service: str,
        base_url: str,
        user_agent: str,
        connect_timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.service = service
        self.base_url = base_url
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"User-Agent": user_agent},
            timeout=httpx.Timeout(None, connect=connect_timeout),
            follow_redirects=True,
            transport=transport,
        )

    async def _get(self, path: str, identifier: str, model: Type[ModelT]) -> CallResult[ModelT]:
        """GET ``path`` and decode the body as ``model``."""
        start_time = time.perf_counter()
        result = await self._fetch(path, identifier, model)

        outcome = {Found: "found", NotFound: "not_found"}.get(type(result), "failed")
        metrics.record_remote_call(self.service, outcome, time.perf_counter() - start_time)
        return result

    async def _fetch(self, path: str, identifier: str, model: Type[ModelT]) -> CallResult[ModelT]:
        try:
            response = await self._client.get(path)
        except httpx.HTTPError as e:
            return CallFailed(identifier, f"{type(e).__name__}: {e}")

        if response.status_code == httpx.codes.NOT_FOUND:
            problem = _problem_fields(response)
            return NotFound(
                identifier=identifier,
                problem_type=problem.get("type", "about:blank"),
                title=problem.get("title"),
            )
        if response.is_error:
            return CallFailed(identifier, f"HTTP {response.status_code}")

        try:
            return Found(model.model_validate(response.json()))
        except (ValueError, ValidationError) as e:
            return CallFailed(identifier, f"Invalid response body: {e}")

    async def aclose(self) -> None:
        await self._client.aclose()


class OrderServiceClient(ServiceClient):
    """Client for ``GET /api/v1/orders/{orderId}``."""

    def __init__(self, base_url: str, **kwargs) -> None:
        super().__init__("orders", base_url, **kwargs)

    async def find_order(self, order_id: str) -> CallResult[Order]:
        return await self._get(f"/api/v1/orders/{order_id}", order_id, Order)


class ItemServiceClient(ServiceClient):
    """Client for ``GET /api/v1/items/{itemId}``."""

    def __init__(self, base_url: str, **kwargs) -> None:
        super().__init__("items", base_url, **kwargs)

    async def find_item(self, item_id: str) -> CallResult[OrderItem]:
        return await self._get(f"/api/v1/items/{item_id}", item_id, OrderItem)


def create_service_clients(
    settings: Settings,
    user_agent: str,
    orders_transport: Optional[httpx.AsyncBaseTransport] = None,
    items_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> tuple[OrderServiceClient, ItemServiceClient]:
    """Build both clients from settings."""
    orders = OrderServiceClient(
        settings.services_orders,
        user_agent=user_agent,
        connect_timeout=settings.http_connect_timeout,
        transport=orders_transport,
    )
    items = ItemServiceClient(
        settings.services_items,
        user_agent=user_agent,
        connect_timeout=settings.http_connect_timeout,
        transport=items_transport,
    )
    return orders, items


def _problem_fields(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
