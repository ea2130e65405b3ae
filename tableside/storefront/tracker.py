"""Customer-facing order status lookup"""

from typing import Optional

import httpx
import structlog

from tableside.schemas.order import OrderStatusLookup
from tableside.services.orders import normalize_order_code
from tableside.storefront.client import PlatformError

logger = structlog.get_logger()

EMPTY_CODE_MESSAGE = "Please enter your order code."
NOT_FOUND_MESSAGE = "Order not found. Please double-check your code and try again."
UNAVAILABLE_MESSAGE = "Unable to retrieve order status right now. Please try again later."


class OrderTracker:
    """Looks orders up by tracking code; ``gateway`` exposes ``get_order_status``"""

    def __init__(self, gateway):
        self.gateway = gateway
        self.order: Optional[OrderStatusLookup] = None
        self.error: Optional[str] = None
        self.loading = False

    async def track(self, order_code: str) -> Optional[OrderStatusLookup]:
        code = normalize_order_code(order_code)
        self.order = None
        if not code:
            self.error = EMPTY_CODE_MESSAGE
            return None

        self.error = None
        self.loading = True
        try:
            order = await self.gateway.get_order_status(code)
        except (PlatformError, httpx.HTTPError) as e:
            logger.error("Order lookup failed", order_code=code, error=str(e))
            self.error = UNAVAILABLE_MESSAGE
            return None
        finally:
            self.loading = False

        if order is None:
            self.error = NOT_FOUND_MESSAGE
            return None

        self.order = order
        return order
