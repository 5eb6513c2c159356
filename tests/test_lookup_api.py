"""
API tests for the orders and items services.
"""
import pytest
from httpx import AsyncClient

from otel_demo.api import orders as orders_api
from otel_demo.api.app import create_service_app


class TestOrdersApi:
    """Tests for GET /api/v1/orders/{orderId}."""

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_get_known_order(self, orders_client: AsyncClient) -> None:
        """Test the seeded order is served with camelCase fields."""
        response = await orders_client.get("/api/v1/orders/e5377e96-c6c6-4f00-bdd1-f36efb6b9b6a")

        assert response.status_code == 200
        assert response.json() == {
            "orderId": "e5377e96-c6c6-4f00-bdd1-f36efb6b9b6a",
            "customerId": "johndoe",
            "state": "New",
            "dueDate": "2022-11-14T09:13:30Z",
            "itemIds": [
                "41a1c650-df66-46d0-b7fb-96a117c5dda7",
                "e5b6da9d-ba51-4119-b527-ace1aaa7985e",
            ],
        }

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_get_canceled_order(self, orders_client: AsyncClient) -> None:
        """Test the second seeded order."""
        response = await orders_client.get("/api/v1/orders/998d14af-aac1-4082-8194-990a3c24f553")

        assert response.status_code == 200
        data = response.json()
        assert data["customerId"] == "bartsimpsons"
        assert data["state"] == "Canceled"
        assert data["dueDate"] == "2022-11-25T09:34:30Z"
        assert data["itemIds"] == ["dc68e695-e8c3-4bc9-9531-28aed4a6ecd6"]

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_get_unknown_order(self, orders_client: AsyncClient) -> None:
        """Test an unknown order maps to a 404 problem body."""
        response = await orders_client.get("/api/v1/orders/unknown-id")

        assert response.status_code == 404
        assert response.headers["content-type"].startswith("application/problem+json")
        assert response.json() == {
            "type": "urn:problem-type:order-not-found",
            "title": "Order not found: unknown-id",
            "status": 404,
            "instance": "/api/v1/orders/unknown-id",
        }

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_request_counts_hit(self, orders_client: AsyncClient, metric_value) -> None:
        """Test each request increments the orders hit counter."""
        before = metric_value("hit_counter_hits_total", {"page": "orders"})

        await orders_client.get("/api/v1/orders/unknown-id")

        assert metric_value("hit_counter_hits_total", {"page": "orders"}) == before + 1


class TestItemsApi:
    """Tests for GET /api/v1/items/{itemId}."""

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_get_known_item(self, items_client: AsyncClient) -> None:
        """Test a seeded item is served as stored."""
        response = await items_client.get("/api/v1/items/dc68e695-e8c3-4bc9-9531-28aed4a6ecd6")

        assert response.status_code == 200
        assert response.json() == {
            "itemId": "dc68e695-e8c3-4bc9-9531-28aed4a6ecd6",
            "title": "T-shirt: Kubernetes is boring",
            "price": "27",
        }

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_get_unknown_item(self, items_client: AsyncClient) -> None:
        """Test an unknown item maps to a 404 with the item problem type."""
        response = await items_client.get("/api/v1/items/unknown-id")

        assert response.status_code == 404
        problem = response.json()
        assert problem["type"] == "urn:problem-type:item-not-found"
        assert problem["title"] == "Item not found: unknown-id"
        assert problem["status"] == 404

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_request_id_header(self, items_client: AsyncClient) -> None:
        """Test every response carries a request id."""
        response = await items_client.get("/api/v1/items/unknown-id")

        assert response.headers["X-Request-ID"]


class TestServiceShell:
    """Tests for the routes and handlers every service shares."""

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_health_endpoints(self, orders_client: AsyncClient) -> None:
        """Test liveness and readiness probes."""
        live = await orders_client.get("/health/live")
        ready = await orders_client.get("/health/ready")

        assert live.status_code == 200
        assert live.json() == {"status": "alive", "service": "orders"}
        assert ready.status_code == 200
        assert ready.json() == {"status": "ready", "service": "orders"}

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_metrics_endpoint(self, items_client: AsyncClient) -> None:
        """Test Prometheus metrics endpoint exposes the hit counter."""
        await items_client.get("/api/v1/items/unknown-id")

        response = await items_client.get("/metrics")

        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]
        assert 'hit_counter_hits_total{page="items"}' in response.text

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_unhandled_exception_is_problem_500(self, test_settings, client_factory) -> None:
        """Test an unexpected error maps to a generic 500 problem body."""
        app = create_service_app("orders", test_settings, description="test")

        @app.get("/boom")
        async def boom() -> None:
            raise RuntimeError("kaboom")

        async with client_factory(app, raise_app_exceptions=False) as client:
            response = await client.get("/boom")

        assert response.status_code == 500
        assert response.json() == {
            "type": "about:blank",
            "title": "Internal Server Error",
            "status": 500,
            "instance": "/boom",
        }

    @pytest.mark.unit
    def test_create_app_uses_given_catalog(self, test_settings) -> None:
        """Test the factory keeps an injected catalog."""
        from otel_demo.core.catalog import create_order_catalog

        catalog = create_order_catalog(max_delay_ms=0, records={})
        app = orders_api.create_app(test_settings, catalog=catalog)

        assert app.state.catalog is catalog
