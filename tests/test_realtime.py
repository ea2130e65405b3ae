"""Tests for the order change feed"""

import asyncio
from uuid import uuid4

import pytest

from tableside.services.realtime import ChangeType, OrderChangeFeed


async def test_subscriber_receives_changes_in_order():
    feed = OrderChangeFeed()
    order_id = uuid4()

    async with feed.subscribe() as subscription:
        feed.publish(ChangeType.INSERT, order_id)
        feed.publish(ChangeType.UPDATE, order_id)
        feed.publish(ChangeType.DELETE, order_id)

        received = [await subscription.__anext__() for _ in range(3)]

    assert [c.type for c in received] == [ChangeType.INSERT, ChangeType.UPDATE, ChangeType.DELETE]
    assert all(c.order_id == str(order_id) for c in received)


async def test_changes_before_subscribing_are_not_delivered():
    feed = OrderChangeFeed()
    feed.publish(ChangeType.INSERT, uuid4())

    subscription = feed.subscribe()
    later = uuid4()
    feed.publish(ChangeType.UPDATE, later)
    subscription.close()

    received = [change async for change in subscription]
    assert [c.order_id for c in received] == [str(later)]


async def test_closed_subscription_yields_nothing_more():
    feed = OrderChangeFeed()
    subscription = feed.subscribe()
    subscription.close()

    feed.publish(ChangeType.INSERT, uuid4())

    assert [change async for change in subscription] == []
    # Not restartable
    assert [change async for change in subscription] == []
    assert feed.subscriber_count == 0


async def test_close_wakes_pending_consumer():
    feed = OrderChangeFeed()
    subscription = feed.subscribe()

    async def consume():
        return [change async for change in subscription]

    task = asyncio.create_task(consume())
    await asyncio.sleep(0)
    feed.publish(ChangeType.INSERT, uuid4())
    feed.close()

    received = await asyncio.wait_for(task, timeout=1)
    assert len(received) == 1


async def test_fan_out_to_every_subscriber():
    feed = OrderChangeFeed()
    first = feed.subscribe()
    second = feed.subscribe()
    assert feed.subscriber_count == 2

    feed.publish(ChangeType.INSERT, uuid4())
    feed.close()

    assert len([c async for c in first]) == 1
    assert len([c async for c in second]) == 1


def test_order_stream_refuses_anonymous():
    from fastapi.testclient import TestClient
    from starlette.websockets import WebSocketDisconnect

    from tableside.main import app

    test_client = TestClient(app)
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with test_client.websocket_connect("/realtime/orders"):
            pass
    assert exc_info.value.code == 1008


async def test_stream_access_releases_connection(test_db, owner):
    from tableside.api.realtime import stream_access
    from tableside.models.staff import AdminComponent

    access = await stream_access(owner.token, test_db)

    assert access.can_view(AdminComponent.ORDERS)
    assert not test_db.in_transaction()


async def test_stream_access_anonymous(test_db):
    from tableside.api.realtime import stream_access
    from tableside.models.staff import AdminComponent

    access = await stream_access(None, test_db)
    assert not access.can_view(AdminComponent.ORDERS)


async def test_stop_forwarding_cancels_running_task():
    from tableside.api.realtime import stop_forwarding

    task = asyncio.create_task(asyncio.sleep(60))
    await stop_forwarding(task)
    assert task.cancelled()


async def test_stop_forwarding_collects_failed_task():
    from tableside.api.realtime import stop_forwarding

    async def send_fails():
        raise RuntimeError("socket already closed")

    task = asyncio.create_task(send_fails())
    await asyncio.sleep(0)
    await stop_forwarding(task)
    assert task.done()
    assert isinstance(task.exception(), RuntimeError)
