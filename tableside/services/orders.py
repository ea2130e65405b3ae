"""Order persistence: submission, code lookup and staff updates"""

import uuid
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from tableside.config import settings
from tableside.models.order import Order, OrderStatus, ServiceType
from tableside.models.site import PaymentMethod
from tableside.schemas.order import OrderCreate
from tableside.services.realtime import ChangeType, OrderChangeFeed
from tableside.services.site import load_site_settings

logger = structlog.get_logger()

MAX_CODE_ATTEMPTS = 5


class OrderError(Exception):
    """Base class for order failures"""


class OrderValidationError(OrderError):
    """Order request rejected before any write"""


class OrderNotFoundError(OrderError):
    """No order with that identity"""


def normalize_order_code(code: Optional[str]) -> str:
    """Codes are case-insensitive; the canonical form is trimmed uppercase"""
    return (code or "").strip().upper()


def generate_order_code(length: Optional[int] = None) -> str:
    """Short, typeable tracking code"""
    return uuid.uuid4().hex[: length or settings.order_code_length].upper()


async def _insert_with_fresh_code(db: AsyncSession, fields: dict) -> Order:
    """Insert under a newly drawn code, redrawing when the unique index rejects it"""
    for attempt in range(1, MAX_CODE_ATTEMPTS + 1):
        order = Order(order_code=generate_order_code(), **fields)
        db.add(order)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.warning("Order code collision", attempt=attempt, error=str(e.orig))
            continue
        await db.refresh(order)
        return order
    raise OrderError("Could not allocate a unique order code")


async def create_order(db: AsyncSession, order_data: OrderCreate, feed: OrderChangeFeed) -> Order:
    """Validate and persist one order with status pending"""
    customer_name = order_data.customer_name.strip()
    contact_number = order_data.contact_number.strip()
    if not customer_name or not contact_number:
        raise OrderValidationError("Customer name and contact number are required")

    table_number = (order_data.table_number or "").strip() or None
    if order_data.service_type == ServiceType.DINE_IN and not table_number:
        raise OrderValidationError("Table number is required for table service")
    if order_data.service_type != ServiceType.DINE_IN:
        table_number = None

    if not order_data.items:
        raise OrderValidationError("Order must contain at least one item")

    result = await db.execute(
        select(PaymentMethod).where(
            PaymentMethod.id == order_data.payment_method,
            PaymentMethod.active == True,
        )
    )
    if result.scalar_one_or_none() is None:
        raise OrderValidationError(f"Unknown payment method: {order_data.payment_method}")

    site = await load_site_settings(db)
    total_items = sum(item.quantity for item in order_data.items)
    if total_items > site.cart_item_limit:
        raise OrderValidationError(
            f"Cart limit exceeded. You have {total_items} items, but the limit is {site.cart_item_limit}."
        )

    line_items = [item.model_dump(mode="json") for item in order_data.items]
    subtotal = sum(item.total_price_cents * item.quantity for item in order_data.items)
    total = subtotal + order_data.tip_cents

    order = await _insert_with_fresh_code(db, dict(
        customer_name=customer_name,
        contact_number=contact_number,
        service_type=order_data.service_type.value,
        table_number=table_number,
        payment_method=order_data.payment_method,
        line_items=line_items,
        subtotal_cents=subtotal,
        tip_cents=order_data.tip_cents,
        total_cents=total,
        notes=(order_data.notes or "").strip() or None,
        status=OrderStatus.PENDING.value,
    ))

    logger.info(
        "Order created",
        order_id=str(order.id),
        order_code=order.order_code,
        item_count=total_items,
        total_cents=total,
    )
    feed.publish(ChangeType.INSERT, order.id)
    return order


async def get_order_by_code(db: AsyncSession, order_code: str) -> Optional[Order]:
    code = normalize_order_code(order_code)
    if not code:
        return None
    result = await db.execute(select(Order).where(Order.order_code == code))
    return result.scalar_one_or_none()


async def get_order(db: AsyncSession, order_id: uuid.UUID) -> Order:
    result = await db.execute(select(Order).where(Order.id == order_id))
    order = result.scalar_one_or_none()
    if order is None:
        raise OrderNotFoundError("Order not found")
    return order


async def list_orders(
    db: AsyncSession,
    status: Optional[OrderStatus] = None,
    page: int = 1,
    page_size: int = 50,
) -> Tuple[List[Order], int]:
    """Newest first"""
    query = select(Order)
    count_query = select(func.count(Order.id))

    if status:
        query = query.where(Order.status == status.value)
        count_query = count_query.where(Order.status == status.value)

    total_result = await db.execute(count_query)
    total = total_result.scalar()

    offset = (page - 1) * page_size
    query = query.order_by(Order.created_at.desc()).offset(offset).limit(page_size)
    result = await db.execute(query)
    return list(result.scalars().all()), total


async def update_order_status(
    db: AsyncSession,
    order_id: uuid.UUID,
    status: OrderStatus,
    feed: OrderChangeFeed,
) -> Order:
    """Last-write-wins status change"""
    order = await get_order(db, order_id)
    previous = order.status
    order.status = status.value
    order.updated_at = datetime.utcnow()
    await db.commit()
    await db.refresh(order)

    logger.info("Order status updated", order_id=str(order.id), previous=previous, status=order.status)
    feed.publish(ChangeType.UPDATE, order.id)
    return order


async def delete_order(db: AsyncSession, order_id: uuid.UUID, feed: OrderChangeFeed) -> None:
    order = await get_order(db, order_id)
    await db.delete(order)
    await db.commit()

    logger.info("Order deleted", order_id=str(order_id))
    feed.publish(ChangeType.DELETE, order_id)


async def set_messenger_payload(
    db: AsyncSession,
    order_id: uuid.UUID,
    order_code: str,
    payload: str,
    feed: OrderChangeFeed,
) -> Order:
    """Store the hand-off message; only whoever knows the code may write it"""
    order = await get_order(db, order_id)
    if order.order_code != normalize_order_code(order_code):
        raise OrderNotFoundError("Order not found")

    order.messenger_payload = payload
    order.updated_at = datetime.utcnow()
    await db.commit()
    await db.refresh(order)

    feed.publish(ChangeType.UPDATE, order.id)
    return order
