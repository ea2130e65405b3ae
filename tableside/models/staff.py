"""Staff profile and permission models"""

import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from tableside.database import Base


class StaffRole(str, enum.Enum):
    """Staff roles"""
    OWNER = "owner"
    MANAGER = "manager"
    STAFF = "staff"


class AdminComponent(str, enum.Enum):
    """Admin panels; the unit of permission granularity"""
    DASHBOARD = "dashboard"
    ITEMS = "items"
    ORDERS = "orders"
    CATEGORIES = "categories"
    PAYMENTS = "payments"
    SETTINGS = "settings"
    STAFF = "staff"


ADMIN_COMPONENTS = list(AdminComponent)

ROLE_PRIORITY = {
    StaffRole.OWNER: 0,
    StaffRole.MANAGER: 1,
    StaffRole.STAFF: 2,
}


class StaffProfile(Base):
    """Back-office staff member"""
    __tablename__ = "staff_profiles"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # Nullable: a profile may exist before a login credential is linked
    auth_user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), unique=True)
    email = Column(String(255), unique=True, nullable=False)
    display_name = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=StaffRole.STAFF.value)
    active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    permissions = relationship(
        "StaffPermission",
        back_populates="staff",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def is_owner(self) -> bool:
        return self.role == StaffRole.OWNER.value


class StaffPermission(Base):
    """Per-component view/manage flags, keyed by (staff_id, component)"""
    __tablename__ = "staff_permissions"

    staff_id = Column(
        UUID(as_uuid=True),
        ForeignKey("staff_profiles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    component = Column(String(20), primary_key=True)
    can_view = Column(Boolean, default=False, nullable=False)
    can_manage = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    staff = relationship("StaffProfile", back_populates="permissions")
