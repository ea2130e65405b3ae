"""Pydantic schemas for request/response validation"""

from tableside.schemas.auth import (
    Token,
    TokenPayload,
    RefreshRequest,
)
from tableside.schemas.menu import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    MenuItemCreate,
    MenuItemUpdate,
    MenuItemResponse,
    VariationCreate,
    VariationResponse,
    AddOnCreate,
    AddOnResponse,
)
from tableside.schemas.order import (
    OrderCreate,
    OrderCreated,
    OrderLineItem,
    OrderResponse,
    OrderListResponse,
    OrderStatusLookup,
    OrderStatusUpdate,
    MessengerPayloadUpdate,
    SelectedAddOn,
    SelectedVariation,
)
from tableside.schemas.site import (
    SiteSettings,
    SiteSettingUpdate,
    SiteSettingResponse,
    PaymentMethodCreate,
    PaymentMethodUpdate,
    PaymentMethodResponse,
)
from tableside.schemas.staff import (
    StaffCreate,
    StaffUpdate,
    PermissionUpdate,
    StaffPermissionResponse,
    StaffProfileResponse,
    CreateStaffWithAuthRequest,
    CreateStaffWithAuthResponse,
)

__all__ = [
    "Token",
    "TokenPayload",
    "RefreshRequest",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "MenuItemCreate",
    "MenuItemUpdate",
    "MenuItemResponse",
    "VariationCreate",
    "VariationResponse",
    "AddOnCreate",
    "AddOnResponse",
    "OrderCreate",
    "OrderCreated",
    "OrderLineItem",
    "OrderResponse",
    "OrderListResponse",
    "OrderStatusLookup",
    "OrderStatusUpdate",
    "MessengerPayloadUpdate",
    "SelectedAddOn",
    "SelectedVariation",
    "SiteSettings",
    "SiteSettingUpdate",
    "SiteSettingResponse",
    "PaymentMethodCreate",
    "PaymentMethodUpdate",
    "PaymentMethodResponse",
    "StaffCreate",
    "StaffUpdate",
    "PermissionUpdate",
    "StaffPermissionResponse",
    "StaffProfileResponse",
    "CreateStaffWithAuthRequest",
    "CreateStaffWithAuthResponse",
]
