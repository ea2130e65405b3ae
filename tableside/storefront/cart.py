"""
Cart engine.

Lines are immutable; each mutation builds a new tuple from the current one
and swaps it in with a single assignment. Capacity overflows are silent
no-ops reported through the boolean return value.
"""

import uuid
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel
import structlog

from tableside.config import settings
from tableside.schemas.menu import MenuItemResponse
from tableside.schemas.order import OrderLineItem, SelectedAddOn, SelectedVariation
from tableside.services.pricing import add_on_quantity, unit_price

logger = structlog.get_logger()


class CartLine(BaseModel):
    """One configured item in the cart"""
    id: str
    key: str
    item: MenuItemResponse
    quantity: int
    selected_variation: Optional[SelectedVariation] = None
    selected_add_ons: Tuple[SelectedAddOn, ...] = ()
    unit_price_cents: int

    class Config:
        frozen = True

    @property
    def line_total_cents(self) -> int:
        return self.unit_price_cents * self.quantity


def collapse_add_ons(add_ons: Optional[Iterable]) -> List[SelectedAddOn]:
    """Merge repeated add-ons into one entry per id with a summed quantity"""
    grouped: Dict[str, SelectedAddOn] = {}
    for add_on in add_ons or []:
        add_on_id = str(add_on.id)
        quantity = add_on_quantity(add_on)
        if add_on_id in grouped:
            existing = grouped[add_on_id]
            grouped[add_on_id] = existing.model_copy(update={"quantity": existing.quantity + quantity})
        else:
            grouped[add_on_id] = SelectedAddOn(
                id=add_on_id,
                name=add_on.name,
                price_cents=add_on.price_cents,
                category=getattr(add_on, "category", None) or "extras",
                quantity=quantity,
            )
    return list(grouped.values())


def line_key(item_id, variation: Optional[SelectedVariation], add_ons: Iterable[SelectedAddOn]) -> str:
    """Identity of a configuration: same item, variation and add-on multiset"""
    variation_part = variation.id if variation is not None else "default"
    add_on_part = ",".join(sorted(f"{a.id}:{a.quantity}" for a in add_ons)) or "none"
    return f"{item_id}|{variation_part}|{add_on_part}"


class Cart:
    """Cart bounded by a total-quantity limit read fresh on every check"""

    def __init__(self, limit_source: Optional[Callable[[], int]] = None):
        self._limit_source = limit_source or (lambda: settings.default_cart_item_limit)
        self._lines: Tuple[CartLine, ...] = ()

    @property
    def lines(self) -> Tuple[CartLine, ...]:
        return self._lines

    def get_line(self, line_id: str) -> Optional[CartLine]:
        for line in self._lines:
            if line.id == line_id:
                return line
        return None

    def get_cart_limit(self) -> int:
        return self._limit_source()

    def get_total_items(self) -> int:
        return sum(line.quantity for line in self._lines)

    def get_total_price(self) -> int:
        return sum(line.line_total_cents for line in self._lines)

    @property
    def is_over_limit(self) -> bool:
        return self.get_total_items() > self.get_cart_limit()

    def can_add_to_cart(self, quantity: int = 1) -> bool:
        return self.get_total_items() + quantity <= self.get_cart_limit()

    def add_to_cart(
        self,
        item: MenuItemResponse,
        quantity: int = 1,
        variation=None,
        add_ons: Optional[Iterable] = None,
        now: Optional[datetime] = None,
    ) -> bool:
        """Add ``quantity`` of a configured item; False when it would exceed the limit"""
        if quantity <= 0:
            return False
        if not self.can_add_to_cart(quantity):
            logger.info(
                "Cart limit reached",
                total_items=self.get_total_items(),
                requested=quantity,
                limit=self.get_cart_limit(),
            )
            return False

        selected_variation = None
        if variation is not None:
            selected_variation = SelectedVariation(
                id=str(variation.id),
                name=variation.name,
                price_cents=variation.price_cents,
            )
        selected_add_ons = collapse_add_ons(add_ons)
        key = line_key(item.id, selected_variation, selected_add_ons)

        lines = self._lines
        if any(line.key == key for line in lines):
            self._lines = tuple(
                line.model_copy(update={"quantity": line.quantity + quantity}) if line.key == key else line
                for line in lines
            )
            return True

        line = CartLine(
            id=f"{item.id}:{uuid.uuid4().hex}",
            key=key,
            item=item,
            quantity=quantity,
            selected_variation=selected_variation,
            selected_add_ons=tuple(selected_add_ons),
            unit_price_cents=unit_price(item, selected_variation, selected_add_ons, now),
        )
        self._lines = lines + (line,)
        return True

    def update_quantity(self, line_id: str, quantity: int) -> bool:
        """Set a line's quantity; 0 or less removes it. False when dropped for the limit"""
        if quantity <= 0:
            self.remove_from_cart(line_id)
            return True

        line = self.get_line(line_id)
        if line is None:
            return False

        new_total = self.get_total_items() - line.quantity + quantity
        if new_total > self.get_cart_limit():
            return False

        self._lines = tuple(
            l.model_copy(update={"quantity": quantity}) if l.id == line_id else l
            for l in self._lines
        )
        return True

    def remove_from_cart(self, line_id: str) -> None:
        self._lines = tuple(line for line in self._lines if line.id != line_id)

    def clear_cart(self) -> None:
        self._lines = ()

    def to_line_items(self) -> List[OrderLineItem]:
        """Frozen order snapshot of the current lines"""
        return [
            OrderLineItem(
                id=str(line.item.id),
                name=line.item.name,
                quantity=line.quantity,
                total_price_cents=line.unit_price_cents,
                selected_variation=line.selected_variation,
                selected_add_ons=list(line.selected_add_ons),
            )
            for line in self._lines
        ]
