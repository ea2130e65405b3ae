"""Checkout state machine and order submission"""

import enum
from decimal import Decimal, InvalidOperation
from typing import List, Mapping, Optional, Union
from urllib.parse import parse_qs, quote, urlsplit
from uuid import UUID

import httpx
from pydantic import BaseModel
import structlog

from tableside.config import settings
from tableside.models.order import ServiceType
from tableside.schemas.order import OrderCreate
from tableside.schemas.site import SiteSettings
from tableside.services.pricing import format_price
from tableside.storefront.cart import Cart, CartLine
from tableside.storefront.client import PlatformError
from tableside.storefront.settings import SiteSettingsCache

logger = structlog.get_logger()

# Preset tip amounts in cents (₱20, ₱50, ₱100, ₱200)
TIP_PRESETS = (2000, 5000, 10000, 20000)

TABLE_QUERY_KEYS = ("table", "tableNumber")


class CheckoutStep(str, enum.Enum):
    DETAILS = "details"
    PAYMENT = "payment"


class PlacedOrder(BaseModel):
    """Outcome of a successful submission"""
    order_id: UUID
    order_code: str
    total_cents: int
    messenger_link: Optional[str] = None


def table_number_from_query(query: Union[str, Mapping[str, str], None]) -> Optional[str]:
    """Table hint from an entry URL or its query string"""
    if not query:
        return None
    if isinstance(query, str):
        if "?" in query or "://" in query:
            query = urlsplit(query).query
        params = {key: values[0] for key, values in parse_qs(query).items() if values}
    else:
        params = query

    for key in TABLE_QUERY_KEYS:
        value = (params.get(key) or "").strip()
        if value:
            return value
    return None


def parse_tip(text: str) -> Optional[int]:
    """Peso amount typed by the customer, in cents; None when not a valid amount"""
    try:
        amount = Decimal(text.strip())
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount < 0:
        return None
    return int((amount * 100).quantize(Decimal("1")))


def _describe_line(line: CartLine, currency: str) -> str:
    text = f"- {line.quantity}x {line.item.name}"
    if line.selected_variation is not None:
        text += f" ({line.selected_variation.name})"
    for add_on in line.selected_add_ons:
        text += f" + {add_on.name}"
        if add_on.quantity > 1:
            text += f" x{add_on.quantity}"
    return f"{text} - {format_price(line.line_total_cents, currency)}"


def compose_order_message(
    order_code: str,
    session: "CheckoutSession",
    lines: List[CartLine],
    site: SiteSettings,
) -> str:
    """Plain-text order summary for the messaging hand-off"""
    currency = site.currency
    if session.service_type == ServiceType.DINE_IN:
        service = f"Dine-in (Table {session.table_number.strip()})"
    else:
        service = "Pickup"

    parts = [
        f"New order from {site.site_name}",
        f"Order code: {order_code}",
        "",
        f"Name: {session.customer_name.strip()}",
        f"Contact: {session.contact_number.strip()}",
        f"Service: {service}",
        f"Payment: {session.payment_method}",
        "",
        "Items:",
    ]
    parts.extend(_describe_line(line, currency) for line in lines)
    parts.append("")
    subtotal = sum(line.line_total_cents for line in lines)
    parts.append(f"Subtotal: {format_price(subtotal, currency)}")
    if session.tip_cents > 0:
        parts.append(f"Tip: {format_price(session.tip_cents, currency)}")
    parts.append(f"Total: {format_price(subtotal + session.tip_cents, currency)}")
    if session.notes.strip():
        parts.append(f"Notes: {session.notes.strip()}")
    return "\n".join(parts)


def messenger_link(page: str, message: str) -> str:
    return f"{settings.messenger_base_url}/{page}?text={quote(message)}"


class CheckoutSession:
    """
    Two-step checkout: customer details, then payment and submission.

    ``gateway`` is anything exposing ``create_order`` and
    ``set_messenger_payload`` (normally a ``StorefrontClient``).
    """

    def __init__(
        self,
        cart: Cart,
        gateway,
        site_settings: SiteSettingsCache,
        table_number: Optional[str] = None,
    ):
        self.cart = cart
        self.gateway = gateway
        self.site_settings = site_settings

        self.step = CheckoutStep.DETAILS
        self.customer_name = ""
        self.contact_number = ""
        self.payment_method = ""
        self.notes = ""

        table_hint = (table_number or "").strip()
        self.table_locked = bool(table_hint)
        self.table_number = table_hint
        self.service_type = ServiceType.DINE_IN if table_hint else ServiceType.PICKUP

        self.tip_cents = 0
        self.custom_tip = ""

        self.is_submitting = False
        self.submit_error: Optional[str] = None
        self.order_id: Optional[UUID] = None
        self.order_code: Optional[str] = None
        self.messenger_link: Optional[str] = None

    # Details step

    def set_service_type(self, service_type: ServiceType) -> None:
        service_type = ServiceType(service_type)
        if self.table_locked and service_type != ServiceType.DINE_IN:
            return
        self.service_type = service_type

    def set_table_number(self, table_number: str) -> None:
        if not self.table_locked:
            self.table_number = table_number

    @property
    def details_valid(self) -> bool:
        if not self.customer_name.strip() or not self.contact_number.strip():
            return False
        if self.service_type == ServiceType.DINE_IN and not self.table_number.strip():
            return False
        return True

    def proceed_to_payment(self) -> bool:
        if not self.details_valid or self.cart.is_over_limit:
            return False
        self.step = CheckoutStep.PAYMENT
        return True

    def back_to_details(self) -> None:
        self.step = CheckoutStep.DETAILS

    # Tips

    def select_tip(self, amount_cents: int) -> None:
        self.tip_cents = amount_cents
        self.custom_tip = ""

    def set_custom_tip(self, text: str) -> None:
        self.custom_tip = text
        if not text.strip():
            self.tip_cents = 0
            return
        amount = parse_tip(text)
        if amount is not None:
            self.tip_cents = amount

    @property
    def final_total_cents(self) -> int:
        return self.cart.get_total_price() + self.tip_cents

    # Submission

    def _limit_error(self) -> Optional[str]:
        total_items = self.cart.get_total_items()
        limit = self.cart.get_cart_limit()
        if total_items > limit:
            return f"Cart limit exceeded. You have {total_items} items, but the limit is {limit}."
        return None

    async def place_order(self) -> Optional[PlacedOrder]:
        """Submit the cart; None when nothing was placed (see ``submit_error``)"""
        if self.is_submitting:
            return None

        limit_error = self._limit_error()
        if limit_error:
            self.submit_error = limit_error
            return None
        if not self.cart.lines:
            self.submit_error = "Your cart is empty."
            return None
        if not self.details_valid:
            self.submit_error = "Please fill in your name, contact number and table number."
            return None
        if not self.payment_method:
            self.submit_error = "Please choose a payment method."
            return None

        self.is_submitting = True
        self.submit_error = None
        try:
            site = await self.site_settings.get()
            lines = list(self.cart.lines)
            is_dine_in = self.service_type == ServiceType.DINE_IN
            order = OrderCreate(
                customer_name=self.customer_name.strip(),
                contact_number=self.contact_number.strip(),
                service_type=self.service_type,
                table_number=self.table_number.strip() if is_dine_in else None,
                payment_method=self.payment_method,
                items=self.cart.to_line_items(),
                tip_cents=self.tip_cents,
                notes=self.notes.strip() or None,
            )
            created = await self.gateway.create_order(order)
            order_code = created.order_code.upper()

            link = None
            if site.messenger_page:
                message = compose_order_message(order_code, self, lines, site)
                try:
                    await self.gateway.set_messenger_payload(created.id, order_code, message)
                except (PlatformError, httpx.HTTPError) as e:
                    logger.error("Failed to save messenger payload", order_code=order_code, error=str(e))
                link = messenger_link(site.messenger_page, message)

            self.order_id = created.id
            self.order_code = order_code
            self.messenger_link = link
            self.cart.clear_cart()

            logger.info("Order placed", order_code=order_code, total_cents=created.total_cents)
            return PlacedOrder(
                order_id=created.id,
                order_code=order_code,
                total_cents=created.total_cents,
                messenger_link=link,
            )
        except PlatformError as e:
            logger.error("Error placing order", status=e.status_code, error=e.detail)
            self.submit_error = e.detail or "Failed to submit order"
            return None
        except httpx.HTTPError as e:
            logger.error("Error placing order", error=str(e))
            self.submit_error = "Failed to submit order"
            return None
        finally:
            self.is_submitting = False

    def copy_order_code(self) -> Optional[str]:
        return self.order_code
