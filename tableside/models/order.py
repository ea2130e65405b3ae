"""Order model"""

import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON, Text, Integer
from sqlalchemy.dialects.postgresql import UUID

from tableside.database import Base


class OrderStatus(str, enum.Enum):
    """Order lifecycle"""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ServiceType(str, enum.Enum):
    """How the order is handed over"""
    DINE_IN = "dine-in"  # served at the table
    PICKUP = "pickup"  # picked up at the bar


class Order(Base):
    """Storefront orders"""
    __tablename__ = "orders"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    order_code = Column(String(20), unique=True, nullable=False, index=True)

    # Customer information
    customer_name = Column(String(255), nullable=False)
    contact_number = Column(String(50), nullable=False)

    # Service
    service_type = Column(String(20), nullable=False, default=ServiceType.PICKUP.value)
    table_number = Column(String(20))
    payment_method = Column(String(100), nullable=False)

    # Frozen snapshot of cart lines at checkout
    # [{"id": "...", "name": "...", "quantity": 2, "total_price_cents": 15000,
    #   "selected_variation": {...}, "selected_add_ons": [...]}, ...]
    line_items = Column(JSON, nullable=False)

    # Pricing
    subtotal_cents = Column(Integer, nullable=False, default=0)
    tip_cents = Column(Integer, nullable=False, default=0)
    total_cents = Column(Integer, nullable=False, default=0)

    notes = Column(Text)
    status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value)

    # Formatted summary handed off to the messaging deep link
    messenger_payload = Column(Text)

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
