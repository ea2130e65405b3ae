"""Database models"""

from tableside.models.menu import Category, MenuItem, Variation, AddOn
from tableside.models.order import Order, OrderStatus, ServiceType
from tableside.models.site import SiteSetting, PaymentMethod
from tableside.models.staff import (
    StaffProfile,
    StaffPermission,
    StaffRole,
    AdminComponent,
    ADMIN_COMPONENTS,
)
from tableside.models.user import User

__all__ = [
    "Category",
    "MenuItem",
    "Variation",
    "AddOn",
    "Order",
    "OrderStatus",
    "ServiceType",
    "SiteSetting",
    "PaymentMethod",
    "StaffProfile",
    "StaffPermission",
    "StaffRole",
    "AdminComponent",
    "ADMIN_COMPONENTS",
    "User",
]
