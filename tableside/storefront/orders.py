"""Admin order board"""

from collections import Counter
from typing import AsyncIterable, Dict, List, Optional
from uuid import UUID

import structlog

from tableside.models.order import OrderStatus
from tableside.schemas.order import OrderResponse

logger = structlog.get_logger()


class OrderBoard:
    """
    Local mirror of the order list for the admin panel.

    Every change notification triggers a full refetch; events carry no order
    data. ``gateway`` is normally a ``StorefrontClient`` holding a staff token.
    """

    def __init__(self, gateway):
        self.gateway = gateway
        self.orders: List[OrderResponse] = []
        self.loading = False
        self.error: Optional[str] = None
        self.updating_id: Optional[UUID] = None

    async def refresh(self) -> List[OrderResponse]:
        self.loading = True
        try:
            result = await self.gateway.list_orders()
        except Exception as e:
            logger.error("Failed to load orders", error=str(e))
            self.error = str(e)
            raise
        finally:
            self.loading = False

        self.error = None
        self.orders = list(result.items)
        return self.orders

    async def update_status(self, order_id: UUID, status: OrderStatus) -> None:
        self.updating_id = order_id
        try:
            await self.gateway.update_order_status(order_id, status)
            await self.refresh()
        except Exception as e:
            logger.error("Failed to update order status", order_id=str(order_id), error=str(e))
            raise
        finally:
            self.updating_id = None

    async def remove(self, order_id: UUID) -> None:
        self.updating_id = order_id
        try:
            await self.gateway.delete_order(order_id)
            await self.refresh()
        except Exception as e:
            logger.error("Failed to delete order", order_id=str(order_id), error=str(e))
            raise
        finally:
            self.updating_id = None

    def filtered(self, status: Optional[OrderStatus] = None) -> List[OrderResponse]:
        if status is None:
            return list(self.orders)
        return [order for order in self.orders if order.status == OrderStatus(status)]

    def counts_by_status(self) -> Dict[OrderStatus, int]:
        counts = Counter(order.status for order in self.orders)
        return {status: counts.get(status, 0) for status in OrderStatus}

    async def watch(self, events: AsyncIterable) -> int:
        """Refetch on every change event until the stream ends; returns events seen"""
        seen = 0
        async for event in events:
            seen += 1
            logger.debug("Order change received", change=str(getattr(event, "type", event)))
            await self.refresh()
        return seen
