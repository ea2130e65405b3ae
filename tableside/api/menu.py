"""Menu item API endpoints"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
import structlog

from tableside.database import get_db
from tableside.models.menu import AddOn, Category, MenuItem, Variation
from tableside.models.staff import AdminComponent
from tableside.models.user import User
from tableside.schemas.menu import (
    AddOnResponse,
    MenuItemCreate,
    MenuItemUpdate,
    MenuItemResponse,
    VariationResponse,
)
from tableside.services.pricing import effective_price, is_on_discount, utc_now
from tableside.api.auth import access_for_user, get_optional_user, require_permission

router = APIRouter()
logger = structlog.get_logger()


def menu_item_response(item: MenuItem, now: Optional[datetime] = None) -> MenuItemResponse:
    """Serialize an item with the price in effect at ``now``"""
    now = now or utc_now()
    return MenuItemResponse(
        id=item.id,
        name=item.name,
        description=item.description or "",
        base_price_cents=item.base_price_cents,
        category_id=item.category_id,
        image_url=item.image_url,
        popular=bool(item.popular),
        available=bool(item.available),
        discount_price_cents=item.discount_price_cents,
        discount_start_date=item.discount_start_date,
        discount_end_date=item.discount_end_date,
        discount_active=bool(item.discount_active),
        variations=[VariationResponse.model_validate(v) for v in item.variations],
        add_ons=[AddOnResponse.model_validate(a) for a in item.add_ons],
        effective_price_cents=effective_price(item, now),
        is_on_discount=is_on_discount(item, now),
    )


async def _load_item(db: AsyncSession, item_id: UUID) -> MenuItem:
    result = await db.execute(
        select(MenuItem)
        .where(MenuItem.id == item_id)
        .options(selectinload(MenuItem.variations), selectinload(MenuItem.add_ons))
        .execution_options(populate_existing=True)
    )
    item = result.scalar_one_or_none()
    if not item:
        raise HTTPException(status_code=404, detail="Menu item not found")
    return item


async def _ensure_category(db: AsyncSession, category_id: str) -> None:
    result = await db.execute(select(Category.id).where(Category.id == category_id))
    if result.scalar_one_or_none() is None:
        raise HTTPException(status_code=400, detail=f"Unknown category: {category_id}")


@router.get("", response_model=List[MenuItemResponse])
async def list_menu_items(
    category: Optional[str] = None,
    include_unavailable: bool = False,
    current_user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    """List menu items; anonymous callers only see available ones"""
    if include_unavailable:
        access = await access_for_user(db, current_user)
        if not access.can_view(AdminComponent.ITEMS):
            raise HTTPException(status_code=403, detail="Insufficient permissions")

    query = select(MenuItem)

    if category:
        query = query.where(MenuItem.category_id == category)

    if not include_unavailable:
        query = query.where(MenuItem.available == True)

    query = query.options(selectinload(MenuItem.variations), selectinload(MenuItem.add_ons))
    query = query.order_by(MenuItem.category_id, MenuItem.name)

    result = await db.execute(query)
    now = utc_now()
    return [menu_item_response(item, now) for item in result.scalars().all()]


@router.post("", response_model=MenuItemResponse, status_code=201)
async def create_menu_item(
    item_data: MenuItemCreate,
    _=Depends(require_permission(AdminComponent.ITEMS, manage=True)),
    db: AsyncSession = Depends(get_db),
):
    """Create a new menu item"""
    await _ensure_category(db, item_data.category_id)

    item_dict = item_data.model_dump(exclude={"variations", "add_ons"})
    item = MenuItem(**item_dict)
    item.variations = [Variation(**v.model_dump()) for v in item_data.variations]
    item.add_ons = [AddOn(**a.model_dump()) for a in item_data.add_ons]
    db.add(item)
    await db.commit()

    logger.info("Menu item created", item_id=str(item.id), name=item.name)
    return menu_item_response(await _load_item(db, item.id))


@router.get("/{item_id}", response_model=MenuItemResponse)
async def get_menu_item(
    item_id: UUID,
    current_user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    """Get a specific menu item"""
    item = await _load_item(db, item_id)
    if not item.available:
        access = await access_for_user(db, current_user)
        if not access.can_view(AdminComponent.ITEMS):
            raise HTTPException(status_code=404, detail="Menu item not found")
    return menu_item_response(item)


@router.put("/{item_id}", response_model=MenuItemResponse)
async def update_menu_item(
    item_id: UUID,
    item_data: MenuItemUpdate,
    _=Depends(require_permission(AdminComponent.ITEMS, manage=True)),
    db: AsyncSession = Depends(get_db),
):
    """Update a menu item; variation and add-on lists are replaced when given"""
    item = await _load_item(db, item_id)

    updates = item_data.model_dump(exclude_unset=True, exclude={"variations", "add_ons"})
    if updates.get("category_id"):
        await _ensure_category(db, updates["category_id"])

    for field, value in updates.items():
        setattr(item, field, value)

    if item_data.variations is not None:
        item.variations = [Variation(**v.model_dump()) for v in item_data.variations]
    if item_data.add_ons is not None:
        item.add_ons = [AddOn(**a.model_dump()) for a in item_data.add_ons]

    item.updated_at = datetime.utcnow()
    await db.commit()

    logger.info("Menu item updated", item_id=str(item_id))
    return menu_item_response(await _load_item(db, item_id))


@router.delete("/{item_id}", status_code=204)
async def delete_menu_item(
    item_id: UUID,
    _=Depends(require_permission(AdminComponent.ITEMS, manage=True)),
    db: AsyncSession = Depends(get_db),
):
    """Delete a menu item with its variations and add-ons"""
    item = await _load_item(db, item_id)
    await db.delete(item)
    await db.commit()
    logger.info("Menu item deleted", item_id=str(item_id))
