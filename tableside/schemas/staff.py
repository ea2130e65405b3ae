"""Staff schemas"""

from datetime import datetime
from typing import Optional, List
from uuid import UUID
from pydantic import BaseModel, EmailStr

from tableside.models.staff import AdminComponent, StaffRole


class StaffPermissionResponse(BaseModel):
    """One cell row of the permission matrix"""
    component: AdminComponent
    can_view: bool = False
    can_manage: bool = False

    class Config:
        from_attributes = True


class StaffProfileResponse(BaseModel):
    """Staff profile with its full permission matrix"""
    id: UUID
    auth_user_id: Optional[UUID] = None
    email: str
    display_name: str
    role: StaffRole
    active: bool
    permissions: List[StaffPermissionResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class StaffCreate(BaseModel):
    """Create a profile only; a credential can be linked later"""
    email: EmailStr
    display_name: str
    role: StaffRole = StaffRole.STAFF
    auth_user_id: Optional[UUID] = None


class StaffUpdate(BaseModel):
    """Update staff profile"""
    display_name: Optional[str] = None
    role: Optional[StaffRole] = None
    active: Optional[bool] = None
    auth_user_id: Optional[UUID] = None


class PermissionUpdate(BaseModel):
    """Partial permission change; omitted flags keep their stored value"""
    can_view: Optional[bool] = None
    can_manage: Optional[bool] = None


class CreateStaffWithAuthRequest(BaseModel):
    """Body of the create-staff-with-auth function; checked by hand for 400s"""
    email: Optional[str] = None
    password: Optional[str] = None
    displayName: Optional[str] = None
    role: Optional[str] = None


class CreateStaffWithAuthResponse(BaseModel):
    """Created profile plus confirmation text"""
    staff: StaffProfileResponse
    message: str
