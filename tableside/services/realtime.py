"""In-process change feed for the orders collection"""

import asyncio
import enum
from datetime import datetime
from typing import Optional, Set

from pydantic import BaseModel, Field
import structlog

logger = structlog.get_logger()


class ChangeType(str, enum.Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class OrderChange(BaseModel):
    """One change notification; carries identity only, consumers refetch"""
    type: ChangeType
    order_id: str
    at: datetime = Field(default_factory=datetime.utcnow)


_CLOSED = object()


class OrderSubscription:
    """
    Lazy, non-restartable stream of order changes.

    Only changes published after subscribing are delivered. Once closed (or
    once iteration has ended) the subscription yields nothing more.
    """

    def __init__(self, feed: "OrderChangeFeed", max_pending: int = 1000):
        self._feed = feed
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=max_pending)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _deliver(self, change: OrderChange) -> None:
        if self._closed:
            return
        try:
            self._queue.put_nowait(change)
        except asyncio.QueueFull:
            logger.warning("Order subscription backlog full, dropping change", order_id=change.order_id)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._feed._discard(self)
        # Wake a pending consumer
        try:
            self._queue.put_nowait(_CLOSED)
        except asyncio.QueueFull:
            pass

    def __aiter__(self):
        return self

    async def __anext__(self) -> OrderChange:
        if self._closed and self._queue.empty():
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _CLOSED:
            self._closed = True
            raise StopAsyncIteration
        return item

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.close()


class OrderChangeFeed:
    """Fan-out of order changes to every live subscription"""

    def __init__(self):
        self._subscriptions: Set[OrderSubscription] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, max_pending: int = 1000) -> OrderSubscription:
        subscription = OrderSubscription(self, max_pending=max_pending)
        self._subscriptions.add(subscription)
        return subscription

    def _discard(self, subscription: OrderSubscription) -> None:
        self._subscriptions.discard(subscription)

    def publish(self, change_type: ChangeType, order_id, at: Optional[datetime] = None) -> OrderChange:
        change = OrderChange(type=change_type, order_id=str(order_id))
        if at is not None:
            change.at = at
        for subscription in list(self._subscriptions):
            subscription._deliver(change)
        logger.debug(
            "Order change published",
            type=change.type.value,
            order_id=change.order_id,
            subscribers=len(self._subscriptions),
        )
        return change

    def close(self) -> None:
        for subscription in list(self._subscriptions):
            subscription.close()
