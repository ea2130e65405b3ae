"""
Staff profiles, permission matrix and account provisioning.

Owner profiles are protected here, at the service boundary, so the rule
holds no matter which caller attempts the change.
"""

import uuid
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from tableside.config import settings
from tableside.models.staff import (
    ADMIN_COMPONENTS,
    ROLE_PRIORITY,
    AdminComponent,
    StaffPermission,
    StaffProfile,
    StaffRole,
)
from tableside.models.user import User
from tableside.schemas.staff import StaffPermissionResponse, StaffProfileResponse
from tableside.security import get_password_hash

logger = structlog.get_logger()


class StaffError(Exception):
    """Base class for staff management failures"""


class StaffNotFoundError(StaffError):
    pass


class StaffConflictError(StaffError):
    pass


class OwnerProtectedError(StaffError):
    pass


class ProvisioningError(StaffError):
    pass


# Rows seeded for a new profile, as (can_view, can_manage)
DEFAULT_PERMISSIONS: Dict[StaffRole, Dict[AdminComponent, Tuple[bool, bool]]] = {
    StaffRole.OWNER: {component: (True, True) for component in ADMIN_COMPONENTS},
    StaffRole.MANAGER: {
        AdminComponent.DASHBOARD: (True, True),
        AdminComponent.ITEMS: (True, True),
        AdminComponent.ORDERS: (True, True),
        AdminComponent.CATEGORIES: (True, True),
        AdminComponent.PAYMENTS: (True, True),
        AdminComponent.SETTINGS: (True, False),
        AdminComponent.STAFF: (False, False),
    },
    StaffRole.STAFF: {
        AdminComponent.DASHBOARD: (True, False),
        AdminComponent.ITEMS: (True, False),
        AdminComponent.ORDERS: (True, True),
        AdminComponent.CATEGORIES: (False, False),
        AdminComponent.PAYMENTS: (False, False),
        AdminComponent.SETTINGS: (False, False),
        AdminComponent.STAFF: (False, False),
    },
}


def to_response(profile: StaffProfile) -> StaffProfileResponse:
    """Profile with every component present; missing rows read as no access"""
    rows = {permission.component: permission for permission in profile.permissions}
    permissions = []
    for component in ADMIN_COMPONENTS:
        row = rows.get(component.value)
        permissions.append(
            StaffPermissionResponse(
                component=component,
                can_view=bool(row.can_view) if row else False,
                can_manage=bool(row.can_manage) if row else False,
            )
        )
    return StaffProfileResponse(
        id=profile.id,
        auth_user_id=profile.auth_user_id,
        email=profile.email,
        display_name=profile.display_name,
        role=profile.role,
        active=bool(profile.active),
        permissions=permissions,
        created_at=profile.created_at,
        updated_at=profile.updated_at,
    )


async def get_profile(db: AsyncSession, staff_id: uuid.UUID) -> StaffProfile:
    result = await db.execute(
        select(StaffProfile)
        .where(StaffProfile.id == staff_id)
        .execution_options(populate_existing=True)
    )
    profile = result.scalar_one_or_none()
    if profile is None:
        raise StaffNotFoundError("Staff member not found")
    return profile


async def get_profile_for_user(db: AsyncSession, user_id: uuid.UUID) -> Optional[StaffProfile]:
    result = await db.execute(
        select(StaffProfile)
        .where(StaffProfile.auth_user_id == user_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_staff(db: AsyncSession) -> List[StaffProfile]:
    """Owners first, then managers, then staff; by display name within a role"""
    result = await db.execute(
        select(StaffProfile).execution_options(populate_existing=True)
    )
    profiles = list(result.scalars().all())
    profiles.sort(
        key=lambda p: (ROLE_PRIORITY.get(StaffRole(p.role), 99), p.display_name.lower())
    )
    return profiles


async def create_profile(
    db: AsyncSession,
    email: str,
    display_name: str,
    role: StaffRole = StaffRole.STAFF,
    auth_user_id: Optional[uuid.UUID] = None,
) -> StaffProfile:
    """Create a profile with its default permission rows"""
    role = StaffRole(role)
    email = email.strip().lower()
    profile = StaffProfile(
        id=uuid.uuid4(),
        email=email,
        display_name=display_name.strip(),
        role=role.value,
        active=True,
        auth_user_id=auth_user_id,
    )
    profile.permissions = [
        StaffPermission(component=component.value, can_view=can_view, can_manage=can_manage)
        for component, (can_view, can_manage) in DEFAULT_PERMISSIONS[role].items()
    ]
    profile_id = profile.id
    db.add(profile)

    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning("Staff profile insert rejected", email=email, error=str(e.orig))
        raise StaffConflictError("A staff member with this email or login already exists") from e

    logger.info("Staff profile created", staff_id=str(profile_id), role=role.value)
    return await get_profile(db, profile_id)


async def update_profile(
    db: AsyncSession,
    staff_id: uuid.UUID,
    display_name: Optional[str] = None,
    role: Optional[StaffRole] = None,
    active: Optional[bool] = None,
    auth_user_id: Optional[uuid.UUID] = None,
    link_auth_user: bool = False,
) -> StaffProfile:
    profile = await get_profile(db, staff_id)

    if profile.is_owner:
        if role is not None and StaffRole(role) != StaffRole.OWNER:
            raise OwnerProtectedError("Owner role cannot be changed")
        if active is not None and not active:
            raise OwnerProtectedError("Owner accounts cannot be deactivated")

    if display_name is not None:
        profile.display_name = display_name.strip()
    if role is not None:
        profile.role = StaffRole(role).value
    if active is not None:
        profile.active = active
    if link_auth_user:
        profile.auth_user_id = auth_user_id
    profile.updated_at = datetime.utcnow()

    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise StaffConflictError("That login is already linked to another staff member") from e

    logger.info("Staff profile updated", staff_id=str(staff_id))
    return await get_profile(db, staff_id)


async def delete_profile(db: AsyncSession, staff_id: uuid.UUID) -> None:
    profile = await get_profile(db, staff_id)
    if profile.is_owner:
        raise OwnerProtectedError("Owner accounts cannot be deleted.")

    await db.delete(profile)
    await db.commit()
    logger.info("Staff profile deleted", staff_id=str(staff_id))


async def upsert_permission(
    db: AsyncSession,
    staff_id: uuid.UUID,
    component: AdminComponent,
    can_view: Optional[bool] = None,
    can_manage: Optional[bool] = None,
) -> StaffPermission:
    """Insert or update one (staff, component) row; omitted flags are left alone"""
    component = AdminComponent(component)
    profile = await get_profile(db, staff_id)
    if profile.is_owner and component == AdminComponent.STAFF:
        raise OwnerProtectedError("Owner staff permissions cannot be edited")

    result = await db.execute(
        select(StaffPermission).where(
            StaffPermission.staff_id == staff_id,
            StaffPermission.component == component.value,
        )
    )
    permission = result.scalar_one_or_none()

    if permission is None:
        permission = StaffPermission(
            component=component.value,
            can_view=bool(can_view),
            can_manage=bool(can_manage),
        )
        profile.permissions.append(permission)
    else:
        if can_view is not None:
            permission.can_view = can_view
        if can_manage is not None:
            permission.can_manage = can_manage
        permission.updated_at = datetime.utcnow()

    await db.commit()
    await db.refresh(permission)
    logger.info(
        "Staff permission updated",
        staff_id=str(staff_id),
        component=component.value,
        can_view=permission.can_view,
        can_manage=permission.can_manage,
    )
    return permission


class CredentialStore:
    """Login credentials (the users table)"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, email: str, password: str, display_name: str) -> User:
        user = User(
            email=email.strip().lower(),
            hashed_password=get_password_hash(password),
            display_name=display_name,
            is_active=True,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ProvisioningError("Failed to create auth user: email already registered") from e
        await self.db.refresh(user)
        return user

    async def delete(self, user_id: uuid.UUID) -> None:
        result = await self.db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if user is not None:
            await self.db.delete(user)
            await self.db.commit()


class StaffProvisioner:
    """
    Create a login credential and its linked profile.

    The credential store and the profile table are committed separately, so
    this is an explicit two-phase operation: if the profile phase fails the
    credential created in phase one is deleted again.
    """

    def __init__(self, db: AsyncSession, credentials: Optional[CredentialStore] = None):
        self.db = db
        self.credentials = credentials or CredentialStore(db)

    @staticmethod
    def validate(email, password, display_name, role) -> StaffRole:
        if not email or not password or not display_name or not role:
            raise ValueError("Missing required fields: email, password, displayName, role")
        try:
            parsed = StaffRole(role)
        except ValueError:
            raise ValueError("Invalid role. Must be owner, manager, or staff")
        if len(password) < settings.min_password_length:
            raise ValueError(f"Password must be at least {settings.min_password_length} characters")
        return parsed

    async def provision(
        self,
        email: str,
        password: str,
        display_name: str,
        role: StaffRole,
    ) -> StaffProfile:
        # Phase 1: credential
        user = await self.credentials.create(email, password, display_name)
        user_id = user.id
        logger.info("Auth user created", user_id=str(user_id))

        # Phase 2: profile linked to it
        try:
            profile = await create_profile(
                self.db,
                email=email,
                display_name=display_name,
                role=role,
                auth_user_id=user_id,
            )
        except Exception as e:
            logger.error("Failed to create staff profile, rolling back auth user", user_id=str(user_id), error=str(e))
            await self.db.rollback()
            await self._undo(user_id)
            raise ProvisioningError(f"Failed to create staff profile: {e}") from e

        return profile

    async def _undo(self, user_id: uuid.UUID) -> None:
        try:
            await self.credentials.delete(user_id)
        except Exception as rollback_error:
            logger.error("Failed to rollback auth user", user_id=str(user_id), error=str(rollback_error))
