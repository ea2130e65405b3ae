"""Order schemas"""

from datetime import datetime
from typing import Optional, List
from uuid import UUID
from pydantic import BaseModel, Field

from tableside.models.order import OrderStatus, ServiceType


class SelectedVariation(BaseModel):
    """Variation chosen for a line"""
    id: str
    name: str
    price_cents: int = 0


class SelectedAddOn(BaseModel):
    """Add-on chosen for a line, with how many of it"""
    id: str
    name: str
    price_cents: int = 0
    category: str = "extras"
    quantity: int = Field(1, ge=1)


class OrderLineItem(BaseModel):
    """Frozen snapshot of one cart line"""
    id: str
    name: str
    quantity: int = Field(..., ge=1)
    total_price_cents: int = Field(..., ge=0)  # unit total
    selected_variation: Optional[SelectedVariation] = None
    selected_add_ons: List[SelectedAddOn] = []


class OrderCreate(BaseModel):
    """Create order request"""
    customer_name: str = Field(..., min_length=1)
    contact_number: str = Field(..., min_length=1)
    service_type: ServiceType
    table_number: Optional[str] = None
    payment_method: str
    items: List[OrderLineItem]
    tip_cents: int = Field(0, ge=0)
    notes: Optional[str] = None


class OrderCreated(BaseModel):
    """Identity of a freshly inserted order"""
    id: UUID
    order_code: str
    total_cents: int


class OrderStatusUpdate(BaseModel):
    """Status transition request"""
    status: OrderStatus


class MessengerPayloadUpdate(BaseModel):
    """Hand-off message; the order code proves the caller placed the order"""
    order_code: str
    messenger_payload: str


class OrderResponse(BaseModel):
    """Order response"""
    id: UUID
    order_code: str
    customer_name: str
    contact_number: str
    service_type: ServiceType
    table_number: Optional[str]
    payment_method: str
    line_items: List[OrderLineItem]
    subtotal_cents: int
    tip_cents: int
    total_cents: int
    notes: Optional[str]
    status: OrderStatus
    messenger_payload: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class OrderListResponse(BaseModel):
    """Paginated order list"""
    items: List[OrderResponse]
    total: int
    page: int
    page_size: int


class OrderStatusLookup(BaseModel):
    """Public, anonymous view of an order returned by code lookup"""
    order_code: str
    customer_name: str
    service_type: ServiceType
    table_number: Optional[str] = None
    status: OrderStatus
    subtotal_cents: int
    tip_cents: int = 0
    total_cents: int
    line_items: List[OrderLineItem]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
