"""Site configuration and payment method models"""

from datetime import datetime
from sqlalchemy import Column, String, Integer, Boolean, DateTime, Text

from tableside.database import Base


class SiteSetting(Base):
    """Flat key/value site configuration"""
    __tablename__ = "site_settings"

    id = Column(String(100), primary_key=True)  # site_name, cart_item_limit, ...
    value = Column(Text, nullable=False, default="")
    type = Column(String(20), default="text")  # text, image, boolean, number
    description = Column(Text)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class PaymentMethod(Base):
    """QR-code payment accounts shown at checkout"""
    __tablename__ = "payment_methods"

    id = Column(String(100), primary_key=True)  # gcash, maya, bank-transfer
    name = Column(String(255), nullable=False)
    account_number = Column(String(100), nullable=False)
    account_name = Column(String(255), nullable=False)
    qr_code_url = Column(String(500), nullable=False)
    active = Column(Boolean, default=True)
    sort_order = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
