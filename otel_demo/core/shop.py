"""
Shop index page: fan out to orders and items, fan in to one view.

Calls are made one after another (orders first, then the items of each
surviving order), so the page latency is the sum of all lookups. A lookup
that does not return a record is logged and its order or item is left out
of the page; the page itself is still served.
"""
from typing import List, Optional, Sequence

import structlog
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from otel_demo.integrations.service_clients import ItemServiceClient, OrderServiceClient
from otel_demo.monitoring.metrics import metrics

from .data import INDEX_ORDER_IDS
from .models import CallFailed, Found, FullOrder, IndexPage, NotFound, Order, OrderItem

logger = structlog.get_logger(__name__)
tracer = trace.get_tracer(__name__)


class ShopService:
    """
    Builds the shop index page.

    Args:
        title: Page title
        orders: Client for the orders service
        items: Client for the items service
        order_ids: Orders to list, in display order
    """

    def __init__(
        self,
        title: str,
        orders: OrderServiceClient,
        items: ItemServiceClient,
        order_ids: Sequence[str] = INDEX_ORDER_IDS,
    ) -> None:
        self.title = title
        self.orders = orders
        self.items = items
        self.order_ids = tuple(order_ids)

    async def build_index(self) -> IndexPage:
        logger.info("building_index_page", order_count=len(self.order_ids))
        metrics.record_hit("index")

        with tracer.start_as_current_span("shop.indexPage") as span:
            orders: List[Order] = []
            for order_id in self.order_ids:
                order = await self.fetch_order(order_id)
                if order is not None:
                    orders.append(order)

            full_orders: List[FullOrder] = []
            for order in orders:
                items: List[OrderItem] = []
                for item_id in order.item_ids:
                    item = await self.fetch_item(item_id)
                    if item is not None:
                        items.append(item)
                full_orders.append(FullOrder.from_order(order, items))

            span.add_event("built", {"orders": len(full_orders)})

        return IndexPage(title=self.title, orders=full_orders)

    async def fetch_order(self, order_id: str) -> Optional[Order]:
        with tracer.start_as_current_span("shop.findOrder") as span:
            span.set_attribute("order", order_id)
            logger.info("fetching_order_details", order_id=order_id)

            result = await self.orders.find_order(order_id)
            if isinstance(result, Found):
                return result.value

            _mark_failed(span, result)
            logger.warning(
                "order_fetch_failed", order_id=order_id, reason=_describe(result)
            )
            return None

    async def fetch_item(self, item_id: str) -> Optional[OrderItem]:
        with tracer.start_as_current_span("shop.findItem") as span:
            span.set_attribute("item", item_id)
            logger.info("fetching_item_details", item_id=item_id)

            result = await self.items.find_item(item_id)
            if isinstance(result, Found):
                return result.value

            _mark_failed(span, result)
            logger.warning(
                "item_fetch_failed", item_id=item_id, reason=_describe(result)
            )
            return None


def _describe(result: NotFound | CallFailed) -> str:
    if isinstance(result, NotFound):
        return result.title or f"not found: {result.identifier}"
    return result.reason


def _mark_failed(span: trace.Span, result: NotFound | CallFailed) -> None:
    span.set_status(Status(StatusCode.ERROR, _describe(result)))
    span.set_attribute("lookup.outcome", "not_found" if isinstance(result, NotFound) else "failed")
