"""Site settings API endpoints"""

from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from tableside.database import get_db
from tableside.models.site import SiteSetting
from tableside.models.staff import AdminComponent
from tableside.schemas.site import SiteSettings, SiteSettingResponse, SiteSettingUpdate
from tableside.services.site import load_site_settings
from tableside.api.auth import require_permission

router = APIRouter()
logger = structlog.get_logger()


@router.get("", response_model=SiteSettings)
async def get_site_settings(db: AsyncSession = Depends(get_db)):
    """Parsed public settings, defaults filled in"""
    return await load_site_settings(db)


@router.get("/raw", response_model=List[SiteSettingResponse])
async def list_raw_settings(
    _=Depends(require_permission(AdminComponent.SETTINGS)),
    db: AsyncSession = Depends(get_db),
):
    """Stored key/value rows"""
    result = await db.execute(select(SiteSetting).order_by(SiteSetting.id))
    return result.scalars().all()


@router.put("/{key}", response_model=SiteSettingResponse)
async def update_site_setting(
    key: str,
    setting_data: SiteSettingUpdate,
    _=Depends(require_permission(AdminComponent.SETTINGS, manage=True)),
    db: AsyncSession = Depends(get_db),
):
    """Create or replace one setting"""
    result = await db.execute(select(SiteSetting).where(SiteSetting.id == key))
    setting = result.scalar_one_or_none()

    if setting is None:
        setting = SiteSetting(id=key, type=setting_data.type or "text")
        db.add(setting)

    setting.value = setting_data.value
    if setting_data.type is not None:
        setting.type = setting_data.type
    if setting_data.description is not None:
        setting.description = setting_data.description
    setting.updated_at = datetime.utcnow()

    await db.commit()
    await db.refresh(setting)

    logger.info("Site setting updated", key=key)
    return setting
