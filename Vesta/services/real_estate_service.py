"""Real estate listings (/realestates)."""

from Vesta.core.client.models.wire import ListingType, RealEstate, RealEstateType
from Vesta.core.client.utils.constants import DEFAULT_PAGE_SIZE

from .base import ListingCategoryService


class RealEstateService(ListingCategoryService[RealEstate]):
    base_path = "/realestates"
    model = RealEstate
    listing_type = ListingType.REAL_ESTATE.value

    async def get_by_room_count(self, room_count: int, page: int = 0, size: int = DEFAULT_PAGE_SIZE):
        return await self.search({"minRoomCount": room_count, "maxRoomCount": room_count}, page, size)

    async def get_by_type(self, real_estate_type: RealEstateType, page: int = 0, size: int = DEFAULT_PAGE_SIZE):
        return await self.search({"realEstateType": real_estate_type}, page, size)
