"""Site settings cache shared by the storefront components"""

from typing import Awaitable, Callable, Optional

import structlog

from tableside.config import settings
from tableside.schemas.site import SiteSettings

logger = structlog.get_logger()


class SiteSettingsCache:
    """
    Lazily loaded settings bag.

    The first ``get()`` loads through ``loader``; later calls are served from
    memory until ``refresh()``. Build one per storefront session and hand it to
    the cart and checkout.
    """

    def __init__(self, loader: Callable[[], Awaitable[SiteSettings]]):
        self._loader = loader
        self._current: Optional[SiteSettings] = None

    @property
    def current(self) -> Optional[SiteSettings]:
        return self._current

    async def get(self) -> SiteSettings:
        if self._current is None:
            self._current = await self._loader()
            logger.debug("Site settings loaded", cart_item_limit=self._current.cart_item_limit)
        return self._current

    async def refresh(self) -> SiteSettings:
        self._current = None
        return await self.get()

    def cart_item_limit(self) -> int:
        """Cached limit; the configured default until the first load"""
        if self._current is None:
            return settings.default_cart_item_limit
        return self._current.cart_item_limit
