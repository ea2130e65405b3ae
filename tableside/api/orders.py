"""Order API endpoints"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tableside.database import get_db
from tableside.models.order import OrderStatus
from tableside.models.staff import AdminComponent
from tableside.schemas.order import (
    MessengerPayloadUpdate,
    OrderCreate,
    OrderCreated,
    OrderListResponse,
    OrderResponse,
    OrderStatusUpdate,
)
from tableside.services import orders as order_service
from tableside.services.realtime import OrderChangeFeed
from tableside.api.auth import require_permission

router = APIRouter()


def get_order_feed(request: Request) -> OrderChangeFeed:
    return request.app.state.order_feed


@router.get("", response_model=OrderListResponse)
async def list_orders(
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    status: Optional[OrderStatus] = None,
    _=Depends(require_permission(AdminComponent.ORDERS)),
    db: AsyncSession = Depends(get_db),
):
    """List orders, newest first, with pagination"""
    orders, total = await order_service.list_orders(db, status=status, page=page, page_size=page_size)
    return OrderListResponse(
        items=[OrderResponse.model_validate(order) for order in orders],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post("", response_model=OrderCreated, status_code=201)
async def create_order(
    order_data: OrderCreate,
    db: AsyncSession = Depends(get_db),
    feed: OrderChangeFeed = Depends(get_order_feed),
):
    """Place an order; open to anonymous customers"""
    try:
        order = await order_service.create_order(db, order_data, feed)
    except order_service.OrderValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except order_service.OrderError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return OrderCreated(id=order.id, order_code=order.order_code, total_cents=order.total_cents)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: UUID,
    _=Depends(require_permission(AdminComponent.ORDERS)),
    db: AsyncSession = Depends(get_db),
):
    """Get a specific order"""
    try:
        return await order_service.get_order(db, order_id)
    except order_service.OrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: UUID,
    status_data: OrderStatusUpdate,
    _=Depends(require_permission(AdminComponent.ORDERS, manage=True)),
    db: AsyncSession = Depends(get_db),
    feed: OrderChangeFeed = Depends(get_order_feed),
):
    """Move an order to any status"""
    try:
        return await order_service.update_order_status(db, order_id, status_data.status, feed)
    except order_service.OrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{order_id}/messenger_payload", response_model=OrderCreated)
async def update_messenger_payload(
    order_id: UUID,
    payload_data: MessengerPayloadUpdate,
    db: AsyncSession = Depends(get_db),
    feed: OrderChangeFeed = Depends(get_order_feed),
):
    """Attach the hand-off message to a just-placed order"""
    try:
        order = await order_service.set_messenger_payload(
            db,
            order_id,
            payload_data.order_code,
            payload_data.messenger_payload,
            feed,
        )
    except order_service.OrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return OrderCreated(id=order.id, order_code=order.order_code, total_cents=order.total_cents)


@router.delete("/{order_id}", status_code=204)
async def delete_order(
    order_id: UUID,
    _=Depends(require_permission(AdminComponent.ORDERS, manage=True)),
    db: AsyncSession = Depends(get_db),
    feed: OrderChangeFeed = Depends(get_order_feed),
):
    """Delete an order"""
    try:
        await order_service.delete_order(db, order_id, feed)
    except order_service.OrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
