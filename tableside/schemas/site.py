"""Site settings and payment method schemas"""

from typing import Optional
from pydantic import BaseModel


class SiteSettings(BaseModel):
    """Parsed site configuration bag"""
    site_name: str = "Tableside"
    site_logo: str = ""
    site_description: str = ""
    currency: str = "₱"
    currency_code: str = "PHP"
    cart_item_limit: int = 50
    messenger_page: Optional[str] = None


class SiteSettingUpdate(BaseModel):
    """Update one raw setting"""
    value: str
    type: Optional[str] = None
    description: Optional[str] = None


class SiteSettingResponse(BaseModel):
    """Raw setting row"""
    id: str
    value: str
    type: str
    description: Optional[str]

    class Config:
        from_attributes = True


class PaymentMethodCreate(BaseModel):
    """Create payment method"""
    id: str
    name: str
    account_number: str
    account_name: str
    qr_code_url: str
    active: bool = True
    sort_order: int = 0


class PaymentMethodUpdate(BaseModel):
    """Update payment method"""
    name: Optional[str] = None
    account_number: Optional[str] = None
    account_name: Optional[str] = None
    qr_code_url: Optional[str] = None
    active: Optional[bool] = None
    sort_order: Optional[int] = None


class PaymentMethodResponse(BaseModel):
    """Payment method response"""
    id: str
    name: str
    account_number: str
    account_name: str
    qr_code_url: str
    active: bool
    sort_order: int

    class Config:
        from_attributes = True
