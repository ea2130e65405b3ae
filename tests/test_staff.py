"""Tests for staff management, permissions and account provisioning"""

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from tableside.models.staff import AdminComponent, StaffRole
from tableside.models.user import User
from tableside.services import staff as staff_service


def permission_map(profile_json):
    return {p["component"]: (p["can_view"], p["can_manage"]) for p in profile_json["permissions"]}


@pytest.mark.asyncio
async def test_default_permissions_by_role(owner_client: AsyncClient, manager, staff_member):
    response = await owner_client.get("/staff")
    assert response.status_code == 200
    profiles = {p["role"]: p for p in response.json()}

    owner_perms = permission_map(profiles["owner"])
    assert all(flags == (True, True) for flags in owner_perms.values())

    manager_perms = permission_map(profiles["manager"])
    assert manager_perms["settings"] == (True, False)
    assert manager_perms["staff"] == (False, False)
    assert manager_perms["orders"] == (True, True)

    staff_perms = permission_map(profiles["staff"])
    assert staff_perms["orders"] == (True, True)
    assert staff_perms["items"] == (True, False)
    assert staff_perms["payments"] == (False, False)
    assert len(staff_perms) == len(list(AdminComponent))


@pytest.mark.asyncio
async def test_list_orders_owners_first(owner_client: AsyncClient, test_db, staff_member, manager):
    await staff_service.create_profile(test_db, "aaron@example.com", "Aaron", StaffRole.STAFF)

    response = await owner_client.get("/staff")
    roles = [p["role"] for p in response.json()]
    names = [p["display_name"] for p in response.json()]
    assert roles == ["owner", "manager", "staff", "staff"]
    assert names[2:] == ["Aaron", "Staff"]


@pytest.mark.asyncio
async def test_staff_without_permission_cannot_list(staff_client: AsyncClient):
    response = await staff_client.get("/staff")
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_owner_cannot_be_deleted(owner_client: AsyncClient, owner):
    response = await owner_client.delete(f"/staff/{owner.profile_id}")
    assert response.status_code == 403
    assert "Owner" in response.json()["detail"]

    response = await owner_client.get(f"/staff/{owner.profile_id}")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_owner_role_and_active_are_protected(owner_client: AsyncClient, owner):
    response = await owner_client.put(f"/staff/{owner.profile_id}", json={"role": "staff"})
    assert response.status_code == 403

    response = await owner_client.put(f"/staff/{owner.profile_id}", json={"active": False})
    assert response.status_code == 403

    response = await owner_client.put(f"/staff/{owner.profile_id}", json={"display_name": "The Boss"})
    assert response.status_code == 200
    assert response.json()["display_name"] == "The Boss"
    assert response.json()["role"] == "owner"


@pytest.mark.asyncio
async def test_owner_staff_permission_is_protected(owner_client: AsyncClient, owner):
    response = await owner_client.put(
        f"/staff/{owner.profile_id}/permissions/staff",
        json={"can_manage": False},
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_permission_upsert_preserves_other_flag(owner_client: AsyncClient, staff_member):
    response = await owner_client.put(
        f"/staff/{staff_member.profile_id}/permissions/orders",
        json={"can_manage": False},
    )
    assert response.status_code == 200
    assert response.json() == {"component": "orders", "can_view": True, "can_manage": False}

    response = await owner_client.put(
        f"/staff/{staff_member.profile_id}/permissions/settings",
        json={"can_view": True},
    )
    assert response.json() == {"component": "settings", "can_view": True, "can_manage": False}


@pytest.mark.asyncio
async def test_permission_row_created_when_missing(test_db, staff_member):
    from tableside.models.staff import StaffPermission

    permission = (await test_db.execute(
        select(StaffPermission).where(
            StaffPermission.staff_id == staff_member.profile_id,
            StaffPermission.component == "payments",
        )
    )).scalar_one()
    await test_db.delete(permission)
    await test_db.commit()

    updated = await staff_service.upsert_permission(
        test_db, staff_member.profile_id, AdminComponent.PAYMENTS, can_view=True
    )
    assert updated.can_view is True
    assert updated.can_manage is False


@pytest.mark.asyncio
async def test_create_and_delete_profile(owner_client: AsyncClient):
    response = await owner_client.post(
        "/staff",
        json={"email": "New.Hire@Example.com", "display_name": "New Hire", "role": "manager"},
    )
    assert response.status_code == 201
    created = response.json()
    assert created["email"] == "new.hire@example.com"
    assert created["auth_user_id"] is None

    response = await owner_client.post(
        "/staff",
        json={"email": "new.hire@example.com", "display_name": "Again", "role": "staff"},
    )
    assert response.status_code == 409

    response = await owner_client.delete(f"/staff/{created['id']}")
    assert response.status_code == 204

    response = await owner_client.get(f"/staff/{created['id']}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_me_returns_profile(staff_client: AsyncClient):
    response = await staff_client.get("/auth/me")
    assert response.status_code == 200
    assert response.json()["role"] == "staff"


@pytest.mark.asyncio
async def test_login_and_refresh(client: AsyncClient, owner):
    response = await client.post("/auth/login", data={"username": owner.email, "password": owner.password})
    assert response.status_code == 200
    tokens = response.json()

    response = await client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert response.status_code == 200

    # Rotated: the first refresh token no longer works
    response = await client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_rejects_bad_password(client: AsyncClient, owner):
    response = await client.post("/auth/login", data={"username": owner.email, "password": "nope"})
    assert response.status_code == 401


# create-staff-with-auth

FUNCTION_URL = "/functions/v1/create-staff-with-auth"


@pytest.mark.asyncio
async def test_function_requires_credential(client: AsyncClient):
    response = await client.post(FUNCTION_URL, json={})
    assert response.status_code == 401

    response = await client.post(FUNCTION_URL, json={}, headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_function_requires_active_owner(client: AsyncClient, manager):
    response = await client.post(
        FUNCTION_URL,
        json={"email": "x@example.com", "password": "secret123", "displayName": "X", "role": "staff"},
        headers={"Authorization": f"Bearer {manager.token}"},
    )
    assert response.status_code == 403
    assert response.json()["detail"] == "Only active owners can create staff accounts"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"password": "secret123", "displayName": "X", "role": "staff"},
        {"email": "x@example.com", "password": "secret123", "displayName": "X", "role": "chef"},
        {"email": "x@example.com", "password": "123", "displayName": "X", "role": "staff"},
    ],
)
async def test_function_validates_fields(owner_client: AsyncClient, body):
    response = await owner_client.post(FUNCTION_URL, json=body)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_function_creates_login_and_profile(owner_client: AsyncClient, client: AsyncClient):
    response = await owner_client.post(
        FUNCTION_URL,
        json={"email": "barista@example.com", "password": "secret123", "displayName": "Barista", "role": "staff"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["staff"]["email"] == "barista@example.com"
    assert data["staff"]["auth_user_id"] is not None
    assert permission_map(data["staff"])["orders"] == (True, True)

    # The new account can log in
    response = await client.post("/auth/login", data={"username": "barista@example.com", "password": "secret123"})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_function_rejects_existing_login(owner_client: AsyncClient, owner):
    response = await owner_client.post(
        FUNCTION_URL,
        json={"email": owner.email, "password": "secret123", "displayName": "Dup", "role": "staff"},
    )
    assert response.status_code == 400
    assert response.json()["detail"].startswith("Failed to create")


@pytest.mark.asyncio
async def test_provisioning_rolls_back_credential(test_db):
    """A profile failure leaves no credential behind"""
    await staff_service.create_profile(test_db, "taken@example.com", "Existing", StaffRole.STAFF)

    provisioner = staff_service.StaffProvisioner(test_db)
    with pytest.raises(staff_service.ProvisioningError):
        await provisioner.provision("taken@example.com", "secret123", "Dup", StaffRole.STAFF)

    result = await test_db.execute(select(User).where(User.email == "taken@example.com"))
    assert result.scalar_one_or_none() is None


@pytest.mark.asyncio
async def test_failed_undo_still_raises_original(test_db):
    class StuckCredentials(staff_service.CredentialStore):
        async def delete(self, user_id):
            raise RuntimeError("credential store offline")

    await staff_service.create_profile(test_db, "taken@example.com", "Existing", StaffRole.STAFF)

    provisioner = staff_service.StaffProvisioner(test_db, StuckCredentials(test_db))
    with pytest.raises(staff_service.ProvisioningError):
        await provisioner.provision("taken@example.com", "secret123", "Dup", StaffRole.STAFF)


@pytest.mark.asyncio
async def test_provisioning_rolls_back_on_database_failure(test_db, monkeypatch):
    """Any profile-phase failure, not only a conflict, removes the credential"""
    async def lost_connection(*args, **kwargs):
        raise OperationalError("INSERT INTO staff_profiles", {}, Exception("server closed the connection"))

    monkeypatch.setattr(staff_service, "create_profile", lost_connection)

    provisioner = staff_service.StaffProvisioner(test_db)
    with pytest.raises(staff_service.ProvisioningError) as exc_info:
        await provisioner.provision("new@example.com", "secret123", "New Hire", StaffRole.STAFF)

    assert isinstance(exc_info.value.__cause__, OperationalError)
    result = await test_db.execute(select(User).where(User.email == "new@example.com"))
    assert result.scalar_one_or_none() is None
