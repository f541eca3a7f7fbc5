"""Favorites (/favorites)."""

from typing import List

from Vesta.core.client.models.wire import Favorite

from .base import BaseService, parse_list, parse_one


class FavoriteService(BaseService):

    async def add(self, listing_id: int, listing_type: str) -> Favorite:
        data = await self.api.post("/favorites", params={"listingId": listing_id, "listingType": listing_type})
        return parse_one(Favorite, data)

    async def remove(self, listing_id: int) -> None:
        await self.api.delete(f"/favorites/{listing_id}")

    async def get_all(self) -> List[Favorite]:
        return parse_list(Favorite, await self.api.get("/favorites"))

    async def is_favorite(self, listing_id: int) -> bool:
        data = await self.api.get(f"/favorites/check/{listing_id}")
        return bool((data or {}).get("isFavorite"))
