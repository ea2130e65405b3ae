"""Tests for the authorization capability"""

from types import SimpleNamespace

from tableside.models.staff import ADMIN_COMPONENTS, AdminComponent
from tableside.services.access import AccessControl


def make_profile(role="staff", active=True, permissions=None):
    rows = [
        SimpleNamespace(component=component, can_view=view, can_manage=manage)
        for component, (view, manage) in (permissions or {}).items()
    ]
    return SimpleNamespace(role=role, active=active, permissions=rows)


def test_no_profile_denies_everything():
    access = AccessControl()
    assert not access.active
    assert access.accessible_components == []
    for component in ADMIN_COMPONENTS:
        assert not access.can_view(component)
        assert not access.can_manage(component)


def test_flags_follow_permission_rows():
    access = AccessControl(make_profile(permissions={
        "orders": (True, True),
        "items": (True, False),
    }))
    assert access.can_view(AdminComponent.ORDERS)
    assert access.can_manage(AdminComponent.ORDERS)
    assert access.can_view("items")
    assert not access.can_manage("items")
    assert access.accessible_components == [AdminComponent.ITEMS, AdminComponent.ORDERS]


def test_missing_rows_read_as_no_access():
    access = AccessControl(make_profile(permissions={"orders": (True, False)}))
    assert not access.can_view(AdminComponent.SETTINGS)
    assert not access.can_manage(AdminComponent.SETTINGS)


def test_inactive_profile_denies_everything():
    access = AccessControl(make_profile(active=False, permissions={"orders": (True, True)}))
    assert not access.can_view(AdminComponent.ORDERS)
    assert not access.can_manage(AdminComponent.ORDERS)


def test_active_owner_always_manages_staff():
    access = AccessControl(make_profile(role="owner", permissions={"staff": (False, False)}))
    assert access.is_owner
    assert access.can_view(AdminComponent.STAFF)
    assert access.can_manage(AdminComponent.STAFF)


def test_inactive_owner_gets_nothing():
    access = AccessControl(make_profile(role="owner", active=False))
    assert not access.can_manage(AdminComponent.STAFF)
