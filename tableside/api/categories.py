"""Category API endpoints"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tableside.database import get_db
from tableside.models.menu import Category, MenuItem
from tableside.models.staff import AdminComponent
from tableside.models.user import User
from tableside.schemas.menu import CategoryCreate, CategoryUpdate, CategoryResponse
from tableside.api.auth import access_for_user, get_optional_user, require_permission

router = APIRouter()


async def _get_category(db: AsyncSession, category_id: str) -> Category:
    result = await db.execute(select(Category).where(Category.id == category_id))
    category = result.scalar_one_or_none()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.get("", response_model=List[CategoryResponse])
async def list_categories(
    include_inactive: bool = False,
    current_user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    """List categories by sort order"""
    query = select(Category)
    if include_inactive:
        access = await access_for_user(db, current_user)
        if not access.can_view(AdminComponent.CATEGORIES):
            raise HTTPException(status_code=403, detail="Insufficient permissions")
    else:
        query = query.where(Category.active == True)

    result = await db.execute(query.order_by(Category.sort_order, Category.name))
    return result.scalars().all()


@router.post("", response_model=CategoryResponse, status_code=201)
async def create_category(
    category_data: CategoryCreate,
    _=Depends(require_permission(AdminComponent.CATEGORIES, manage=True)),
    db: AsyncSession = Depends(get_db),
):
    """Create a category; the id is a caller-chosen slug"""
    category = Category(**category_data.model_dump())
    db.add(category)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail="Category already exists")
    await db.refresh(category)
    return category


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str,
    category_data: CategoryUpdate,
    _=Depends(require_permission(AdminComponent.CATEGORIES, manage=True)),
    db: AsyncSession = Depends(get_db),
):
    """Update a category"""
    category = await _get_category(db, category_id)

    for field, value in category_data.model_dump(exclude_unset=True).items():
        setattr(category, field, value)
    category.updated_at = datetime.utcnow()

    await db.commit()
    await db.refresh(category)
    return category


@router.delete("/{category_id}", status_code=204)
async def delete_category(
    category_id: str,
    _=Depends(require_permission(AdminComponent.CATEGORIES, manage=True)),
    db: AsyncSession = Depends(get_db),
):
    """Delete an empty category"""
    category = await _get_category(db, category_id)

    result = await db.execute(
        select(func.count(MenuItem.id)).where(MenuItem.category_id == category_id)
    )
    if result.scalar():
        raise HTTPException(status_code=409, detail="Category still has menu items")

    await db.delete(category)
    await db.commit()
