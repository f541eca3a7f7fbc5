"""Cross-category listing queries (/listings)."""

from typing import List, Optional

from Vesta.api.client import build_page_params
from Vesta.core.client.models.wire import BaseListing, CategoryStats, Page
from Vesta.core.client.utils.constants import DEFAULT_PAGE_SIZE

from .base import BaseService, Body, parse_list, parse_page, to_params


class ListingService(BaseService):

    async def get_all(self) -> List[BaseListing]:
        return parse_list(BaseListing, await self.api.get("/listings"))

    async def get_page(self, page: int = 0, size: int = DEFAULT_PAGE_SIZE,
                       sort: Optional[str] = None) -> Page[BaseListing]:
        data = await self.api.get("/listings/page", params=build_page_params(page, size, sort))
        return parse_page(BaseListing, data)

    async def search(self, filters: Body = None, page: int = 0, size: int = DEFAULT_PAGE_SIZE,
                     sort: Optional[str] = None) -> Page[BaseListing]:
        """Filter by city, district, categorySlug, status, price range or ownerId."""
        params = to_params(filters)
        params.update(build_page_params(page, size, sort))
        return parse_page(BaseListing, await self.api.get("/listings/search", params=params))

    async def get_latest(self, limit: int = 10) -> List[BaseListing]:
        page = await self.get_page(0, limit, "createdAt,desc")
        return page.content

    async def get_my_listings(self) -> List[BaseListing]:
        return parse_list(BaseListing, await self.api.get("/listings/my-listings"))

    async def get_stats(self) -> List[CategoryStats]:
        """Listing count per category."""
        return parse_list(CategoryStats, await self.api.get("/listings/stats"))
