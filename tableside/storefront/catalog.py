"""Session-scoped catalog snapshot"""

from typing import Awaitable, Callable, List, Optional, Tuple

import structlog

from tableside.schemas.menu import CategoryResponse, MenuItemResponse

logger = structlog.get_logger()


class CatalogCache:
    """Categories and menu items as loaded at the last refresh"""

    def __init__(
        self,
        load_categories: Callable[[], Awaitable[List[CategoryResponse]]],
        load_items: Callable[[], Awaitable[List[MenuItemResponse]]],
    ):
        self._load_categories = load_categories
        self._load_items = load_items
        self._categories: Tuple[CategoryResponse, ...] = ()
        self._items: Tuple[MenuItemResponse, ...] = ()
        self.loaded = False

    @classmethod
    def from_client(cls, client) -> "CatalogCache":
        return cls(client.fetch_categories, client.fetch_menu_items)

    @property
    def categories(self) -> Tuple[CategoryResponse, ...]:
        return self._categories

    @property
    def items(self) -> Tuple[MenuItemResponse, ...]:
        return self._items

    async def load(self) -> None:
        if not self.loaded:
            await self.refresh()

    async def refresh(self) -> None:
        categories = await self._load_categories()
        items = await self._load_items()
        self._categories = tuple(sorted(categories, key=lambda c: c.sort_order))
        self._items = tuple(items)
        self.loaded = True
        logger.info("Catalog loaded", categories=len(self._categories), items=len(self._items))

    def items_in(self, category_id: Optional[str]) -> List[MenuItemResponse]:
        """Items of one category; all items for None or "all" """
        if not category_id or category_id == "all":
            return list(self._items)
        return [item for item in self._items if item.category_id == category_id]

    def popular(self) -> List[MenuItemResponse]:
        return [item for item in self._items if item.popular]

    def get_item(self, item_id) -> Optional[MenuItemResponse]:
        for item in self._items:
            if str(item.id) == str(item_id):
                return item
        return None
