"""Realtime order change stream over WebSocket"""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from tableside.database import get_db
from tableside.models.staff import AdminComponent
from tableside.services.access import AccessControl
from tableside.services.realtime import OrderSubscription
from tableside.api.auth import access_for_user, user_from_token

router = APIRouter()
logger = structlog.get_logger()


async def stream_access(token: Optional[str], db: AsyncSession) -> AccessControl:
    """Resolve the caller's permissions, then release the session's connection"""
    try:
        user = await user_from_token(token, db)
        return await access_for_user(db, user)
    finally:
        # The socket may stay open for hours; it must not pin a pooled connection
        await db.close()


async def _forward(websocket: WebSocket, subscription: OrderSubscription) -> None:
    async for change in subscription:
        await websocket.send_json(change.model_dump(mode="json"))


async def stop_forwarding(task: asyncio.Task) -> None:
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
    except Exception as e:
        logger.warning("Order stream forwarder failed", error=str(e))


@router.websocket("/orders")
async def order_changes(
    websocket: WebSocket,
    token: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """
    Push INSERT/UPDATE/DELETE notifications for the orders collection.

    Browsers cannot set headers on a WebSocket handshake, so the access token
    travels as the ``token`` query parameter. Callers without orders view are
    refused with 1008.
    """
    access = await stream_access(token, db)
    if not access.can_view(AdminComponent.ORDERS):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    staff_id = str(access.profile.id)
    await websocket.accept()
    subscription = websocket.app.state.order_feed.subscribe()
    forward_task = asyncio.create_task(_forward(websocket, subscription))
    logger.info("Order stream opened", staff_id=staff_id)

    try:
        # Inbound frames are ignored; receiving only detects disconnects
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("Order stream closed", staff_id=staff_id)
    finally:
        subscription.close()
        await stop_forwarding(forward_task)
