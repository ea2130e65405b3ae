"""
Catalog pricing rules.

All amounts are integer cents. The functions accept anything exposing the
catalog attributes (ORM rows or response schemas), so the platform and the
storefront price items the same way.
"""

from datetime import datetime, timezone
from typing import Iterable, Optional


def utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive timestamps as UTC so they compare with aware ones"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """UTC wall-clock time without tzinfo, the form the DateTime columns store"""
    if value is None:
        return None
    return utc(value).replace(tzinfo=None)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def is_on_discount(item, now: Optional[datetime] = None) -> bool:
    """True when the item's discount window is active and contains ``now``.

    Both window bounds are inclusive; a missing bound is open on that side.
    A discount price of 0 is a valid (free) promotion.
    """
    if not getattr(item, "discount_active", False):
        return False
    if getattr(item, "discount_price_cents", None) is None:
        return False

    now = utc(now) if now is not None else utc_now()
    start = utc(getattr(item, "discount_start_date", None))
    end = utc(getattr(item, "discount_end_date", None))

    if start is not None and now < start:
        return False
    if end is not None and now > end:
        return False
    return True


def effective_price(item, now: Optional[datetime] = None) -> int:
    """Discount price while a discount is running, else the base price"""
    if is_on_discount(item, now):
        return item.discount_price_cents
    return item.base_price_cents


def add_on_quantity(add_on) -> int:
    quantity = getattr(add_on, "quantity", None)
    return quantity if quantity else 1


def unit_price(
    item,
    variation=None,
    add_ons: Optional[Iterable] = None,
    now: Optional[datetime] = None,
) -> int:
    """Price of one configured item: effective price + variation + add-ons"""
    price = effective_price(item, now)
    if variation is not None:
        price += variation.price_cents
    for add_on in add_ons or []:
        price += add_on.price_cents * add_on_quantity(add_on)
    return max(price, 0)


def format_price(cents: int, currency: str = "₱") -> str:
    """Display rule: zero renders as "Free" everywhere a price is shown"""
    if cents == 0:
        return "Free"
    sign = "-" if cents < 0 else ""
    cents = abs(cents)
    return f"{sign}{currency}{cents // 100:,}.{cents % 100:02d}"
