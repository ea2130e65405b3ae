"""Site settings parsing"""

from typing import Dict, Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from tableside.config import settings
from tableside.models.site import SiteSetting
from tableside.schemas.site import SiteSettings

logger = structlog.get_logger()


def parse_site_settings(rows: Iterable[SiteSetting]) -> SiteSettings:
    """Build the typed settings bag from raw key/value rows; unknown keys are ignored"""
    values: Dict[str, str] = {row.id: row.value for row in rows}
    parsed = SiteSettings(
        currency=settings.default_currency,
        currency_code=settings.default_currency_code,
        cart_item_limit=settings.default_cart_item_limit,
    )

    for key in ("site_name", "site_logo", "site_description", "currency", "currency_code"):
        if values.get(key):
            setattr(parsed, key, values[key])

    if values.get("messenger_page"):
        parsed.messenger_page = values["messenger_page"].strip() or None

    raw_limit = values.get("cart_item_limit")
    if raw_limit:
        try:
            limit = int(raw_limit)
        except ValueError:
            logger.warning("Ignoring non-numeric cart_item_limit", value=raw_limit)
        else:
            if limit > 0:
                parsed.cart_item_limit = limit

    return parsed


async def load_site_settings(db: AsyncSession) -> SiteSettings:
    result = await db.execute(select(SiteSetting))
    return parse_site_settings(result.scalars().all())
