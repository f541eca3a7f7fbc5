"""Advanced search, autocomplete, nearby search and saved searches (/search)."""

from typing import List, Optional

from Vesta.core.client.models.wire import BaseListing, Page, SavedSearch, SavedSearchRequest, SearchSuggestion
from Vesta.core.client.utils.constants import (
    DEFAULT_NEARBY_RADIUS_KM,
    DEFAULT_PAGE_SIZE,
    MIN_SUGGESTION_QUERY_LENGTH,
)

from .base import BaseService, Body, parse_list, parse_one, parse_page, to_body, to_params


class SearchService(BaseService):

    async def advanced_search(self, criteria: Body = None, page: int = 0,
                              size: int = DEFAULT_PAGE_SIZE) -> Page[BaseListing]:
        params = to_params(criteria)
        params.update({"page": page, "size": size})
        return parse_page(BaseListing, await self.api.get("/search/advanced", params=params))

    async def get_suggestions(self, query: Optional[str]) -> List[SearchSuggestion]:
        """Autocomplete; queries shorter than two characters never reach the server."""
        if not query or len(query) < MIN_SUGGESTION_QUERY_LENGTH:
            return []
        return parse_list(SearchSuggestion, await self.api.get("/search/suggestions", params={"q": query}))

    async def search_nearby(self, latitude: float, longitude: float,
                            radius_km: float = DEFAULT_NEARBY_RADIUS_KM,
                            page: int = 0, size: int = DEFAULT_PAGE_SIZE) -> Page[BaseListing]:
        data = await self.api.get("/search/nearby", params={
            "lat": latitude,
            "lng": longitude,
            "radius": radius_km,
            "page": page,
            "size": size,
        })
        return parse_page(BaseListing, data)

    async def save_search(self, request: SavedSearchRequest) -> SavedSearch:
        return parse_one(SavedSearch, await self.api.post("/search/saved", to_body(request)))

    async def get_saved_searches(self) -> List[SavedSearch]:
        return parse_list(SavedSearch, await self.api.get("/search/saved"))

    async def get_saved_search(self, search_id: int) -> SavedSearch:
        return parse_one(SavedSearch, await self.api.get(f"/search/saved/{search_id}"))

    async def update_saved_search(self, search_id: int, request: SavedSearchRequest) -> SavedSearch:
        return parse_one(SavedSearch, await self.api.put(f"/search/saved/{search_id}", to_body(request)))

    async def delete_saved_search(self, search_id: int) -> None:
        await self.api.delete(f"/search/saved/{search_id}")

    async def execute_saved_search(self, search_id: int, page: int = 0,
                                   size: int = DEFAULT_PAGE_SIZE) -> Page[BaseListing]:
        data = await self.api.get(f"/search/saved/{search_id}/execute", params={"page": page, "size": size})
        return parse_page(BaseListing, data)
