"""Tests for catalog, payment method and site settings endpoints"""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_public_menu_hides_unavailable(client: AsyncClient, test_menu):
    response = await client.get("/menu_items")
    assert response.status_code == 200
    names = {item["name"] for item in response.json()}
    assert "Pumpkin Spice" not in names
    assert {"Mojito", "Spanish Latte", "Negroni"} <= names


@pytest.mark.asyncio
async def test_include_unavailable_needs_items_view(client: AsyncClient, staff_client: AsyncClient, test_menu):
    response = await client.get("/menu_items", params={"include_unavailable": True})
    assert response.status_code == 403

    response = await staff_client.get("/menu_items", params={"include_unavailable": True})
    assert response.status_code == 200
    assert "Pumpkin Spice" in {item["name"] for item in response.json()}


@pytest.mark.asyncio
async def test_menu_item_carries_effective_price(client: AsyncClient, test_menu):
    response = await client.get(f"/menu_items/{test_menu['Negroni']}")
    assert response.status_code == 200
    data = response.json()
    assert data["base_price_cents"] == 30000
    assert data["effective_price_cents"] == 20000
    assert data["is_on_discount"] is True


@pytest.mark.asyncio
async def test_discount_window_with_offset_is_stored_in_utc(owner_client: AsyncClient, test_menu):
    manila = timezone(timedelta(hours=8))
    now = datetime.now(manila).replace(microsecond=0)
    response = await owner_client.post("/menu_items", json={
        "name": "Paloma",
        "base_price_cents": 10000,
        "category_id": "cocktails",
        "discount_price_cents": 5000,
        "discount_active": True,
        "discount_start_date": (now - timedelta(hours=1)).isoformat(),
        "discount_end_date": (now + timedelta(hours=2)).isoformat(),
    })
    assert response.status_code == 201
    data = response.json()
    expected_start = (now - timedelta(hours=1)).astimezone(timezone.utc).replace(tzinfo=None)
    assert datetime.fromisoformat(data["discount_start_date"]) == expected_start
    assert data["is_on_discount"] is True
    assert data["effective_price_cents"] == 5000

    response = await owner_client.put(f"/menu_items/{data['id']}", json={
        "discount_start_date": (now + timedelta(hours=1)).isoformat(),
    })
    assert response.status_code == 200
    assert response.json()["is_on_discount"] is False
    assert response.json()["effective_price_cents"] == 10000


@pytest.mark.asyncio
async def test_filter_by_category(client: AsyncClient, test_menu):
    response = await client.get("/menu_items", params={"category": "coffee"})
    items = response.json()
    assert [item["name"] for item in items] == ["Spanish Latte"]
    assert [v["name"] for v in items[0]["variations"]] == ["Regular", "Large"]
    assert len(items[0]["add_ons"]) == 2


@pytest.mark.asyncio
async def test_categories_public_and_ordered(client: AsyncClient, test_menu):
    response = await client.get("/categories")
    assert [c["id"] for c in response.json()] == ["cocktails", "coffee"]


@pytest.mark.asyncio
async def test_menu_item_crud(owner_client: AsyncClient, staff_client: AsyncClient, test_menu):
    body = {
        "name": "Paloma",
        "base_price_cents": 28000,
        "category_id": "cocktails",
        "variations": [{"name": "Single", "price_cents": 0}, {"name": "Double", "price_cents": 8000, "sort_order": 1}],
    }

    response = await staff_client.post("/menu_items", json=body)
    assert response.status_code == 403

    response = await owner_client.post("/menu_items", json=body)
    assert response.status_code == 201
    item = response.json()
    assert len(item["variations"]) == 2

    response = await owner_client.put(
        f"/menu_items/{item['id']}",
        json={"available": False, "variations": [{"name": "Pitcher", "price_cents": 50000}]},
    )
    assert response.status_code == 200
    assert response.json()["available"] is False
    assert [v["name"] for v in response.json()["variations"]] == ["Pitcher"]

    response = await owner_client.delete(f"/menu_items/{item['id']}")
    assert response.status_code == 204


@pytest.mark.asyncio
async def test_unknown_category_rejected(owner_client: AsyncClient, test_menu):
    response = await owner_client.post(
        "/menu_items",
        json={"name": "Mystery", "base_price_cents": 100, "category_id": "nope"},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_category_with_items_cannot_be_deleted(owner_client: AsyncClient, test_menu):
    response = await owner_client.delete("/categories/cocktails")
    assert response.status_code == 409

    response = await owner_client.delete("/categories/seasonal")
    assert response.status_code == 204


@pytest.mark.asyncio
async def test_payment_methods_public_list(client: AsyncClient, test_payment_methods):
    response = await client.get("/payment_methods")
    assert [m["id"] for m in response.json()] == ["gcash"]


@pytest.mark.asyncio
async def test_payment_methods_require_payments_manage(
    owner_client: AsyncClient, staff_client: AsyncClient, test_payment_methods
):
    response = await staff_client.put("/payment_methods/gcash", json={"active": False})
    assert response.status_code == 403

    response = await owner_client.put("/payment_methods/gcash", json={"active": False})
    assert response.status_code == 200
    assert response.json()["active"] is False


@pytest.mark.asyncio
async def test_site_settings_defaults_and_update(client: AsyncClient, owner_client: AsyncClient, staff_client: AsyncClient):
    response = await client.get("/site_settings")
    assert response.status_code == 200
    assert response.json()["cart_item_limit"] == 50

    response = await staff_client.put("/site_settings/cart_item_limit", json={"value": "5"})
    assert response.status_code == 403

    response = await owner_client.put("/site_settings/cart_item_limit", json={"value": "5", "type": "number"})
    assert response.status_code == 200

    response = await client.get("/site_settings")
    assert response.json()["cart_item_limit"] == 5


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.json()["status"] == "healthy"
