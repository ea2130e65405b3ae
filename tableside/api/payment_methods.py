"""Payment method API endpoints"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tableside.database import get_db
from tableside.models.site import PaymentMethod
from tableside.models.staff import AdminComponent
from tableside.models.user import User
from tableside.schemas.site import (
    PaymentMethodCreate,
    PaymentMethodResponse,
    PaymentMethodUpdate,
)
from tableside.api.auth import access_for_user, get_optional_user, require_permission

router = APIRouter()


async def _get_method(db: AsyncSession, method_id: str) -> PaymentMethod:
    result = await db.execute(select(PaymentMethod).where(PaymentMethod.id == method_id))
    method = result.scalar_one_or_none()
    if not method:
        raise HTTPException(status_code=404, detail="Payment method not found")
    return method


@router.get("", response_model=List[PaymentMethodResponse])
async def list_payment_methods(
    include_inactive: bool = False,
    current_user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    """Active payment methods in display order"""
    query = select(PaymentMethod)
    if include_inactive:
        access = await access_for_user(db, current_user)
        if not access.can_view(AdminComponent.PAYMENTS):
            raise HTTPException(status_code=403, detail="Insufficient permissions")
    else:
        query = query.where(PaymentMethod.active == True)

    result = await db.execute(query.order_by(PaymentMethod.sort_order, PaymentMethod.name))
    return result.scalars().all()


@router.post("", response_model=PaymentMethodResponse, status_code=201)
async def create_payment_method(
    method_data: PaymentMethodCreate,
    _=Depends(require_permission(AdminComponent.PAYMENTS, manage=True)),
    db: AsyncSession = Depends(get_db),
):
    """Create a payment method"""
    method = PaymentMethod(**method_data.model_dump())
    db.add(method)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail="Payment method already exists")
    await db.refresh(method)
    return method


@router.put("/{method_id}", response_model=PaymentMethodResponse)
async def update_payment_method(
    method_id: str,
    method_data: PaymentMethodUpdate,
    _=Depends(require_permission(AdminComponent.PAYMENTS, manage=True)),
    db: AsyncSession = Depends(get_db),
):
    """Update a payment method"""
    method = await _get_method(db, method_id)

    for field, value in method_data.model_dump(exclude_unset=True).items():
        setattr(method, field, value)
    method.updated_at = datetime.utcnow()

    await db.commit()
    await db.refresh(method)
    return method


@router.delete("/{method_id}", status_code=204)
async def delete_payment_method(
    method_id: str,
    _=Depends(require_permission(AdminComponent.PAYMENTS, manage=True)),
    db: AsyncSession = Depends(get_db),
):
    """Delete a payment method"""
    method = await _get_method(db, method_id)
    await db.delete(method)
    await db.commit()
