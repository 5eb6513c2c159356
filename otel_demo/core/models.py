"""
Domain models shared by the three services.

Records are immutable pydantic models serialized with camelCase field names
(``orderId``, ``dueDate``...). Lookups and remote calls return one of the
result types at the bottom of this module instead of raising, so the HTTP
boundary and the shop decide what a miss means for them.
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Generic, List, Optional, Tuple, TypeVar, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class OrderState(str, Enum):
    """Lifecycle state of an order. Informational only."""

    DRAFT = "Draft"
    NEW = "New"
    IN_PROGRESS = "InProgress"
    ON_HOLD = "OnHold"
    COMPLETED = "Completed"
    CANCELED = "Canceled"


class Record(BaseModel):
    """Base model: frozen, camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Order(Record):
    order_id: str
    customer_id: str
    state: OrderState
    due_date: datetime
    item_ids: Tuple[str, ...] = ()


class OrderItem(Record):
    item_id: str
    title: str
    # Kept as a string, as served by the items service.
    price: str


class FullOrder(Record):
    """An order with its item ids resolved to items."""

    order_id: str
    customer_id: str
    state: OrderState
    due_date: datetime
    items: List[OrderItem] = []

    @classmethod
    def from_order(cls, order: Order, items: List[OrderItem]) -> "FullOrder":
        return cls(
            order_id=order.order_id,
            customer_id=order.customer_id,
            state=order.state,
            due_date=order.due_date,
            items=items,
        )


class IndexPage(Record):
    title: str
    orders: List[FullOrder] = []


# ============================================================================
# Lookup results
# ============================================================================

T = TypeVar("T")


@dataclass(frozen=True)
class Found(Generic[T]):
    """The identifier resolved to ``value``."""

    value: T


@dataclass(frozen=True)
class NotFound:
    """
    The identifier is unknown.

    ``problem_type`` and ``title`` become the RFC 7807 body when the miss is
    served over HTTP.
    """

    identifier: str
    problem_type: str = "about:blank"
    title: Optional[str] = None


@dataclass(frozen=True)
class CallFailed:
    """A remote call did not produce a usable answer."""

    identifier: str
    reason: str


LookupResult = Union[Found[T], NotFound]
CallResult = Union[Found[T], NotFound, CallFailed]
