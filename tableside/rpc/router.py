"""Remote procedures callable by anonymous storefront clients"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from tableside.database import get_db
from tableside.schemas.order import OrderStatusLookup
from tableside.services.orders import get_order_by_code, normalize_order_code

router = APIRouter()
logger = structlog.get_logger()


class GetOrderStatusRequest(BaseModel):
    p_order_code: str


@router.post("/get_order_status", response_model=Optional[OrderStatusLookup])
async def get_order_status(
    request: GetOrderStatusRequest,
    db: AsyncSession = Depends(get_db),
):
    """Look up one order by its tracking code; null when there is none"""
    code = normalize_order_code(request.p_order_code)
    logger.info("RPC: get_order_status", order_code=code)

    order = await get_order_by_code(db, code)
    if order is None:
        return None
    return OrderStatusLookup.model_validate(order)
