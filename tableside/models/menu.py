"""Catalog models"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from tableside.database import Base


class Category(Base):
    """Menu categories"""
    __tablename__ = "categories"

    id = Column(String(100), primary_key=True)  # slug: "cocktails", "coffee", ...
    name = Column(String(255), nullable=False)
    icon = Column(String(50), default="")
    sort_order = Column(Integer, default=0)
    active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    menu_items = relationship("MenuItem", back_populates="category", passive_deletes=True)


class MenuItem(Base):
    """Menu items"""
    __tablename__ = "menu_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    description = Column(Text, default="")
    base_price_cents = Column(Integer, nullable=False)  # Price in cents to avoid float issues
    category_id = Column(String(100), ForeignKey("categories.id"), nullable=False)
    image_url = Column(String(500))
    popular = Column(Boolean, default=False)
    available = Column(Boolean, default=True)

    # Discount window; both bounds inclusive
    discount_price_cents = Column(Integer)
    discount_start_date = Column(DateTime)
    discount_end_date = Column(DateTime)
    discount_active = Column(Boolean, default=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    category = relationship("Category", back_populates="menu_items")
    variations = relationship(
        "Variation",
        back_populates="menu_item",
        cascade="all, delete-orphan",
        order_by="Variation.sort_order",
    )
    add_ons = relationship("AddOn", back_populates="menu_item", cascade="all, delete-orphan")


class Variation(Base):
    """Size/variant options; price is a delta on the effective price"""
    __tablename__ = "variations"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    menu_item_id = Column(UUID(as_uuid=True), ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(100), nullable=False)  # Small, Large, ...
    price_cents = Column(Integer, nullable=False, default=0)
    sort_order = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    menu_item = relationship("MenuItem", back_populates="variations")


class AddOn(Base):
    """Add-ons selectable per item, each with its own quantity at cart time"""
    __tablename__ = "add_ons"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    menu_item_id = Column(UUID(as_uuid=True), ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(100), nullable=False)
    price_cents = Column(Integer, nullable=False, default=0)
    category = Column(String(100), default="extras")  # Groups add-ons in the picker
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    menu_item = relationship("MenuItem", back_populates="add_ons")
