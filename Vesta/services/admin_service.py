"""
Admin dashboard data (/admin).

Statistics, growth series and user management; every call needs an
account with ROLE_ADMIN.
"""

from typing import Any, List

from Vesta.core.client.models.wire import (
    ActivityLog,
    CityDistribution,
    GrowthData,
    ListingStats,
    Page,
    User,
    UserStats,
)
from Vesta.core.client.utils.constants import DEFAULT_ACTIVITY_LIMIT, DEFAULT_GROWTH_MONTHS

from .base import BaseService, parse_list, parse_one, parse_page


class AdminService(BaseService):

    async def get_user_stats(self) -> UserStats:
        return parse_one(UserStats, await self.api.get("/admin/stats/users"))

    async def get_listing_stats(self) -> ListingStats:
        return parse_one(ListingStats, await self.api.get("/admin/stats/listings"))

    async def get_recent_activities(self, limit: int = DEFAULT_ACTIVITY_LIMIT) -> List[ActivityLog]:
        data = await self.api.get("/admin/stats/activities", params={"limit": limit})
        return parse_list(ActivityLog, data)

    async def get_user_growth(self, months: int = DEFAULT_GROWTH_MONTHS) -> List[GrowthData]:
        data = await self.api.get("/admin/stats/growth/users", params={"months": months})
        return parse_list(GrowthData, data)

    async def get_listing_growth(self, months: int = DEFAULT_GROWTH_MONTHS) -> List[GrowthData]:
        data = await self.api.get("/admin/stats/growth/listings", params={"months": months})
        return parse_list(GrowthData, data)

    async def get_city_distribution(self) -> List[CityDistribution]:
        return parse_list(CityDistribution, await self.api.get("/admin/stats/distribution/cities"))

    async def get_users(self, page: int = 0, size: int = 10, sort_by: str = "createdAt",
                        sort_direction: str = "desc") -> Page[User]:
        data = await self.api.get("/admin/users", params={
            "page": page,
            "size": size,
            "sortBy": sort_by,
            "sortDirection": sort_direction,
        })
        return parse_page(User, data)

    async def toggle_user_status(self, user_id: int) -> Any:
        return await self.api.put(f"/admin/users/{user_id}/status", {})

    async def update_user_roles(self, user_id: int, roles: List[str]) -> Any:
        return await self.api.put(f"/admin/users/{user_id}/roles", list(roles))

    async def delete_user(self, user_id: int) -> Any:
        return await self.api.delete(f"/admin/users/{user_id}")
