"""Staff management API endpoints"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from tableside.database import get_db
from tableside.models.staff import AdminComponent
from tableside.schemas.staff import (
    PermissionUpdate,
    StaffCreate,
    StaffPermissionResponse,
    StaffProfileResponse,
    StaffUpdate,
)
from tableside.services import staff as staff_service
from tableside.api.auth import require_permission

router = APIRouter()


def staff_http_error(error: staff_service.StaffError) -> HTTPException:
    """Map a staff service failure to its HTTP status"""
    if isinstance(error, staff_service.StaffNotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, staff_service.OwnerProtectedError):
        return HTTPException(status_code=403, detail=str(error))
    if isinstance(error, staff_service.StaffConflictError):
        return HTTPException(status_code=409, detail=str(error))
    return HTTPException(status_code=400, detail=str(error))


@router.get("", response_model=List[StaffProfileResponse])
async def list_staff(
    _=Depends(require_permission(AdminComponent.STAFF)),
    db: AsyncSession = Depends(get_db),
):
    """List staff, owners first"""
    profiles = await staff_service.list_staff(db)
    return [staff_service.to_response(profile) for profile in profiles]


@router.post("", response_model=StaffProfileResponse, status_code=201)
async def create_staff(
    staff_data: StaffCreate,
    _=Depends(require_permission(AdminComponent.STAFF, manage=True)),
    db: AsyncSession = Depends(get_db),
):
    """Create a profile without a login; one can be linked later"""
    try:
        profile = await staff_service.create_profile(
            db,
            email=staff_data.email,
            display_name=staff_data.display_name,
            role=staff_data.role,
            auth_user_id=staff_data.auth_user_id,
        )
    except staff_service.StaffError as e:
        raise staff_http_error(e)
    return staff_service.to_response(profile)


@router.get("/{staff_id}", response_model=StaffProfileResponse)
async def get_staff(
    staff_id: UUID,
    _=Depends(require_permission(AdminComponent.STAFF)),
    db: AsyncSession = Depends(get_db),
):
    """Get a staff profile"""
    try:
        profile = await staff_service.get_profile(db, staff_id)
    except staff_service.StaffError as e:
        raise staff_http_error(e)
    return staff_service.to_response(profile)


@router.put("/{staff_id}", response_model=StaffProfileResponse)
async def update_staff(
    staff_id: UUID,
    staff_data: StaffUpdate,
    _=Depends(require_permission(AdminComponent.STAFF, manage=True)),
    db: AsyncSession = Depends(get_db),
):
    """Update a staff profile"""
    fields = staff_data.model_dump(exclude_unset=True)
    try:
        profile = await staff_service.update_profile(
            db,
            staff_id,
            display_name=fields.get("display_name"),
            role=fields.get("role"),
            active=fields.get("active"),
            auth_user_id=fields.get("auth_user_id"),
            link_auth_user="auth_user_id" in fields,
        )
    except staff_service.StaffError as e:
        raise staff_http_error(e)
    return staff_service.to_response(profile)


@router.delete("/{staff_id}", status_code=204)
async def delete_staff(
    staff_id: UUID,
    _=Depends(require_permission(AdminComponent.STAFF, manage=True)),
    db: AsyncSession = Depends(get_db),
):
    """Delete a staff profile; owners cannot be deleted"""
    try:
        await staff_service.delete_profile(db, staff_id)
    except staff_service.StaffError as e:
        raise staff_http_error(e)


@router.put("/{staff_id}/permissions/{component}", response_model=StaffPermissionResponse)
async def update_permission(
    staff_id: UUID,
    component: AdminComponent,
    permission_data: PermissionUpdate,
    _=Depends(require_permission(AdminComponent.STAFF, manage=True)),
    db: AsyncSession = Depends(get_db),
):
    """Set one component's flags; omitted flags are left unchanged"""
    try:
        permission = await staff_service.upsert_permission(
            db,
            staff_id,
            component,
            can_view=permission_data.can_view,
            can_manage=permission_data.can_manage,
        )
    except staff_service.StaffError as e:
        raise staff_http_error(e)
    return StaffPermissionResponse.model_validate(permission)
