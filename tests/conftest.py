"""
Pytest configuration and fixtures for the demo services.

Services are mounted in-process: the shop's clients talk to the orders and
items apps through httpx.ASGITransport, or to a fake backend built on
httpx.MockTransport when a test needs a backend to misbehave.
"""
from typing import Any, AsyncGenerator, Callable, Collection, Mapping, Optional

import httpx
import pytest
import pytest_asyncio
from opentelemetry import metrics as otel_metrics
from opentelemetry import trace
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import InMemoryMetricReader
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from prometheus_client import REGISTRY

from otel_demo.api import items as items_api
from otel_demo.api import orders as orders_api
from otel_demo.api import shop as shop_api
from otel_demo.config import Settings
from otel_demo.core.data import ITEMS, ORDERS

# Spans are collected in memory instead of being exported to a collector.
_span_exporter = InMemorySpanExporter()
_tracer_provider = TracerProvider()
_tracer_provider.add_span_processor(SimpleSpanProcessor(_span_exporter))
trace.set_tracer_provider(_tracer_provider)

# Same for OpenTelemetry metrics, read on demand.
_metric_reader = InMemoryMetricReader()
otel_metrics.set_meter_provider(MeterProvider(metric_readers=[_metric_reader]))


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    """In-memory span exporter, emptied before each test."""
    _span_exporter.clear()
    return _span_exporter


@pytest.fixture
def test_settings() -> Settings:
    """Settings with telemetry export and the lookup delay disabled."""
    return Settings(
        app_title="Test Shop",
        app_env="test",
        log_level="DEBUG",
        telemetry_enabled=False,
        lookup_max_delay_ms=0,
    )


@pytest.fixture
def orders_app(test_settings: Settings) -> Any:
    return orders_api.create_app(test_settings)


@pytest.fixture
def items_app(test_settings: Settings) -> Any:
    return items_api.create_app(test_settings)


@pytest.fixture
def shop_app(test_settings: Settings, orders_app: Any, items_app: Any) -> Any:
    """Shop wired to the in-process orders and items apps."""
    return shop_api.create_app(
        test_settings,
        orders_transport=httpx.ASGITransport(app=orders_app),
        items_transport=httpx.ASGITransport(app=items_app),
    )


def make_client(app: Any, raise_app_exceptions: bool = True) -> httpx.AsyncClient:
    """HTTP client talking to ``app`` in-process."""
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions)
    return httpx.AsyncClient(transport=transport, base_url="http://test")


@pytest_asyncio.fixture
async def orders_client(orders_app: Any) -> AsyncGenerator[httpx.AsyncClient, Any]:
    async with make_client(orders_app) as client:
        yield client


@pytest_asyncio.fixture
async def items_client(items_app: Any) -> AsyncGenerator[httpx.AsyncClient, Any]:
    async with make_client(items_app) as client:
        yield client


@pytest_asyncio.fixture
async def shop_client(shop_app: Any) -> AsyncGenerator[httpx.AsyncClient, Any]:
    async with make_client(shop_app) as client:
        yield client
    await shop_app.state.shop.orders.aclose()
    await shop_app.state.shop.items.aclose()


def fake_backend(
    records: Mapping[str, Any],
    failing: Collection[str] = (),
    status_overrides: Optional[Mapping[str, int]] = None,
    seen: Optional[list] = None,
) -> httpx.MockTransport:
    """
    Fake orders/items backend.

    Serves ``records`` by the last path segment; identifiers in ``failing``
    raise a connection error and ``status_overrides`` forces a status code.
    Every request is appended to ``seen`` when given.
    """
    status_overrides = status_overrides or {}

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        identifier = request.url.path.rsplit("/", 1)[-1]
        if identifier in failing:
            raise httpx.ConnectError("Connection refused", request=request)
        if identifier in status_overrides:
            return httpx.Response(status_overrides[identifier], text="boom")
        record = records.get(identifier)
        if record is None:
            return httpx.Response(
                404,
                json={"type": "urn:problem-type:not-found", "title": f"Not found: {identifier}", "status": 404},
            )
        return httpx.Response(200, json=record.model_dump(mode="json", by_alias=True))

    return httpx.MockTransport(handler)


@pytest.fixture
def backend_factory() -> Callable[..., httpx.MockTransport]:
    return fake_backend


@pytest.fixture
def seeded_orders() -> Mapping[str, Any]:
    return ORDERS


@pytest.fixture
def seeded_items() -> Mapping[str, Any]:
    return ITEMS


def sample_value(name: str, labels: Mapping[str, str]) -> float:
    """Current value of a Prometheus sample, 0 if never recorded."""
    return REGISTRY.get_sample_value(name, dict(labels)) or 0.0


@pytest.fixture
def metric_value() -> Callable[[str, Mapping[str, str]], float]:
    return sample_value


@pytest.fixture
def client_factory() -> Callable[..., httpx.AsyncClient]:
    return make_client


def otel_sample_value(name: str, attributes: Mapping[str, str]) -> float:
    """Current cumulative value of an OpenTelemetry sum, 0 if never recorded."""
    data = _metric_reader.get_metrics_data()
    if data is None:
        return 0.0
    for resource_metrics in data.resource_metrics:
        for scope_metrics in resource_metrics.scope_metrics:
            for metric in scope_metrics.metrics:
                if metric.name != name:
                    continue
                for point in metric.data.data_points:
                    if dict(point.attributes) == dict(attributes):
                        return point.value
    return 0.0


@pytest.fixture
def otel_metric_value() -> Callable[[str, Mapping[str, str]], float]:
    return otel_sample_value
