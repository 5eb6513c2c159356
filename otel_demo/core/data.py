"""In-memory records served by the orders and items services."""
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Iterable, Mapping, Tuple

from .models import Order, OrderItem, OrderState


def _index_orders(orders: Iterable[Order]) -> Mapping[str, Order]:
    return MappingProxyType({order.order_id: order for order in orders})


def _index_items(items: Iterable[OrderItem]) -> Mapping[str, OrderItem]:
    return MappingProxyType({item.item_id: item for item in items})


ORDERS: Mapping[str, Order] = _index_orders([
    Order(
        order_id="e5377e96-c6c6-4f00-bdd1-f36efb6b9b6a",
        customer_id="johndoe",
        state=OrderState.NEW,
        due_date=datetime(2022, 11, 14, 9, 13, 30, tzinfo=timezone.utc),
        item_ids=(
            "41a1c650-df66-46d0-b7fb-96a117c5dda7",
            "e5b6da9d-ba51-4119-b527-ace1aaa7985e",
        ),
    ),
    Order(
        order_id="998d14af-aac1-4082-8194-990a3c24f553",
        customer_id="bartsimpsons",
        state=OrderState.CANCELED,
        due_date=datetime(2022, 11, 25, 9, 34, 30, tzinfo=timezone.utc),
        item_ids=("dc68e695-e8c3-4bc9-9531-28aed4a6ecd6",),
    ),
])

ITEMS: Mapping[str, OrderItem] = _index_items([
    OrderItem(
        item_id="41a1c650-df66-46d0-b7fb-96a117c5dda7",
        title="Hat: Spring Boot FTW",
        price="100",
    ),
    OrderItem(
        item_id="e5b6da9d-ba51-4119-b527-ace1aaa7985e",
        title="Laptop sticker: I love Java",
        price="15",
    ),
    OrderItem(
        item_id="dc68e695-e8c3-4bc9-9531-28aed4a6ecd6",
        title="T-shirt: Kubernetes is boring",
        price="27",
    ),
])

# Orders listed on the shop index page, in display order.
INDEX_ORDER_IDS: Tuple[str, ...] = (
    "e5377e96-c6c6-4f00-bdd1-f36efb6b9b6a",
    "998d14af-aac1-4082-8194-990a3c24f553",
)
