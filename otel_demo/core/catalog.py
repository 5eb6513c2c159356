"""
Lookup-by-identifier service backing the orders and items APIs.

Each lookup counts a hit, waits a random 0-999 ms to simulate a slow
backend, and resolves the identifier against a read-only table. Requests are
independent: the only state touched is the metric collectors.
"""
import asyncio
import random
from typing import Awaitable, Callable, Generic, Mapping, Optional, TypeVar

import structlog

from otel_demo.monitoring.metrics import metrics

from .data import ITEMS, ORDERS
from .models import Found, LookupResult, NotFound, Order, OrderItem

logger = structlog.get_logger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


class Catalog(Generic[T]):
    """
    Read-only table with a slow, counted lookup.

    Args:
        page: Metric label for hits and delays ("orders", "items")
        label: Human name of a record, used in the not-found title
        records: Identifier to record mapping, never mutated
        problem_type: Problem type URI reported for unknown identifiers
        max_delay_ms: Exclusive upper bound of the injected delay; 0 disables it
        rng: Random source for the delay
        sleep: Awaitable sleep, ``asyncio.sleep`` by default
    """

    def __init__(
        self,
        page: str,
        label: str,
        records: Mapping[str, T],
        problem_type: str,
        max_delay_ms: int = 1000,
        rng: Optional[random.Random] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if max_delay_ms < 0:
            raise ValueError("max_delay_ms must not be negative")
        self.page = page
        self.label = label
        self.records = records
        self.problem_type = problem_type
        self.max_delay_ms = max_delay_ms
        self._rng = rng or random.Random()
        self._sleep = sleep

    def next_delay(self) -> float:
        """Draw the next delay in seconds, uniformly from [0, max_delay_ms) ms."""
        if self.max_delay_ms == 0:
            return 0.0
        return self._rng.randrange(self.max_delay_ms) / 1000

    async def lookup(self, identifier: str) -> LookupResult[T]:
        metrics.record_hit(self.page)

        logger.info("lookup_started", page=self.page, identifier=identifier)
        record = self.records.get(identifier)

        delay = self.next_delay()
        logger.debug("lookup_delayed", page=self.page, delay_ms=round(delay * 1000))
        metrics.record_lookup_delay(self.page, delay)
        if delay:
            await self._sleep(delay)

        if record is None:
            logger.info("lookup_not_found", page=self.page, identifier=identifier)
            return NotFound(
                identifier=identifier,
                problem_type=self.problem_type,
                title=f"{self.label} not found: {identifier}",
            )

        logger.info("lookup_found", page=self.page, identifier=identifier)
        return Found(record)


def create_order_catalog(
    max_delay_ms: int = 1000,
    records: Optional[Mapping[str, Order]] = None,
    **kwargs,
) -> Catalog[Order]:
    """Catalog over the seeded orders (or ``records``)."""
    return Catalog(
        page="orders",
        label="Order",
        records=ORDERS if records is None else records,
        problem_type="urn:problem-type:order-not-found",
        max_delay_ms=max_delay_ms,
        **kwargs,
    )


def create_item_catalog(
    max_delay_ms: int = 1000,
    records: Optional[Mapping[str, OrderItem]] = None,
    **kwargs,
) -> Catalog[OrderItem]:
    """Catalog over the seeded items (or ``records``)."""
    return Catalog(
        page="items",
        label="Item",
        records=ITEMS if records is None else records,
        problem_type="urn:problem-type:item-not-found",
        max_delay_ms=max_delay_ms,
        **kwargs,
    )
