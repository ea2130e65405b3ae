"""Catalog schemas"""

from datetime import datetime
from typing import Optional, List
from uuid import UUID
from pydantic import BaseModel, Field, field_validator

from tableside.services.pricing import naive_utc


class CategoryCreate(BaseModel):
    """Create category request"""
    id: str = Field(..., min_length=1, max_length=100)
    name: str
    icon: str = ""
    sort_order: int = 0
    active: bool = True


class CategoryUpdate(BaseModel):
    """Update category request"""
    name: Optional[str] = None
    icon: Optional[str] = None
    sort_order: Optional[int] = None
    active: Optional[bool] = None


class CategoryResponse(BaseModel):
    """Category response"""
    id: str
    name: str
    icon: str
    sort_order: int
    active: bool

    class Config:
        from_attributes = True


class VariationCreate(BaseModel):
    """Create variation"""
    name: str
    price_cents: int = 0
    sort_order: int = 0


class VariationResponse(BaseModel):
    """Variation response"""
    id: UUID
    name: str
    price_cents: int

    class Config:
        from_attributes = True


class AddOnCreate(BaseModel):
    """Create add-on"""
    name: str
    price_cents: int = Field(0, ge=0)
    category: str = "extras"


class AddOnResponse(BaseModel):
    """Add-on response"""
    id: UUID
    name: str
    price_cents: int
    category: str

    class Config:
        from_attributes = True


class MenuItemCreate(BaseModel):
    """Create menu item request"""
    name: str
    description: str = ""
    base_price_cents: int = Field(..., ge=0)
    category_id: str
    image_url: Optional[str] = None
    popular: bool = False
    available: bool = True
    discount_price_cents: Optional[int] = Field(None, ge=0)
    discount_start_date: Optional[datetime] = None
    discount_end_date: Optional[datetime] = None
    discount_active: bool = False
    variations: List[VariationCreate] = []
    add_ons: List[AddOnCreate] = []

    @field_validator("discount_start_date", "discount_end_date")
    @classmethod
    def store_as_utc(cls, value):
        return naive_utc(value)


class MenuItemUpdate(BaseModel):
    """Update menu item request; nested lists replace the stored ones when given"""
    name: Optional[str] = None
    description: Optional[str] = None
    base_price_cents: Optional[int] = Field(None, ge=0)
    category_id: Optional[str] = None
    image_url: Optional[str] = None
    popular: Optional[bool] = None
    available: Optional[bool] = None
    discount_price_cents: Optional[int] = Field(None, ge=0)
    discount_start_date: Optional[datetime] = None
    discount_end_date: Optional[datetime] = None
    discount_active: Optional[bool] = None
    variations: Optional[List[VariationCreate]] = None
    add_ons: Optional[List[AddOnCreate]] = None

    @field_validator("discount_start_date", "discount_end_date")
    @classmethod
    def store_as_utc(cls, value):
        return naive_utc(value)


class MenuItemResponse(BaseModel):
    """Menu item response, with the price in effect when it was served"""
    id: UUID
    name: str
    description: str
    base_price_cents: int
    category_id: str
    image_url: Optional[str] = None
    popular: bool = False
    available: bool = True
    discount_price_cents: Optional[int] = None
    discount_start_date: Optional[datetime] = None
    discount_end_date: Optional[datetime] = None
    discount_active: bool = False
    variations: List[VariationResponse] = []
    add_ons: List[AddOnResponse] = []
    effective_price_cents: int
    is_on_discount: bool = False

    class Config:
        from_attributes = True
