"""Side-by-side comparison of listings (/compare)."""

from typing import Iterable

from Vesta.core.client.models.wire import ComparisonResult

from .base import BaseService, parse_one


class ComparisonService(BaseService):

    async def compare(self, listing_ids: Iterable[int]) -> ComparisonResult:
        data = await self.api.post("/compare", {"listingIds": list(listing_ids)})
        return parse_one(ComparisonResult, data)
