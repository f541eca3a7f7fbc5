"""Listing categories (/categories)."""

from typing import Any, List, Optional

from Vesta.api.client import build_page_params
from Vesta.core.client.models.wire import Category, Page
from Vesta.core.client.utils.constants import DEFAULT_PAGE_SIZE

from .base import BaseService, Body, parse_list, parse_one, parse_page, to_body


class CategoryService(BaseService):

    async def get_all(self) -> List[Category]:
        return parse_list(Category, await self.api.get("/categories"))

    async def get_page(self, page: int = 0, size: int = DEFAULT_PAGE_SIZE,
                       sort: Optional[str] = None) -> Page[Category]:
        data = await self.api.get("/categories/page", params=build_page_params(page, size, sort))
        return parse_page(Category, data)

    async def get_by_id(self, category_id: int) -> Category:
        return parse_one(Category, await self.api.get(f"/categories/{category_id}"))

    async def create(self, request: Body) -> Category:
        return parse_one(Category, await self.api.post("/categories", to_body(request)))

    async def update(self, category_id: int, request: Body) -> Category:
        return parse_one(Category, await self.api.put(f"/categories/{category_id}", to_body(request)))

    async def delete(self, category_id: int) -> Any:
        return await self.api.delete(f"/categories/{category_id}")

    async def get_active(self) -> List[Category]:
        return [category for category in await self.get_all() if category.active]

    async def get_by_slug(self, slug: str) -> Optional[Category]:
        for category in await self.get_all():
            if category.slug == slug:
                return category
        return None
