"""Vehicle listings (/vehicles)."""

from Vesta.core.client.models.wire import FuelType, ListingType, Vehicle
from Vesta.core.client.utils.constants import DEFAULT_PAGE_SIZE

from .base import ListingCategoryService


class VehicleService(ListingCategoryService[Vehicle]):
    base_path = "/vehicles"
    model = Vehicle
    listing_type = ListingType.VEHICLE.value

    async def get_by_brand(self, brand: str, page: int = 0, size: int = DEFAULT_PAGE_SIZE):
        return await self.search({"brand": brand}, page, size)

    async def get_by_fuel_type(self, fuel_type: FuelType, page: int = 0, size: int = DEFAULT_PAGE_SIZE):
        return await self.search({"fuelType": fuel_type}, page, size)

    async def get_by_year_range(self, min_year: int, max_year: int,
                                page: int = 0, size: int = DEFAULT_PAGE_SIZE):
        return await self.search({"minYear": min_year, "maxYear": max_year}, page, size)

    async def get_by_kilometer_range(self, min_kilometer: int, max_kilometer: int,
                                     page: int = 0, size: int = DEFAULT_PAGE_SIZE):
        return await self.search({"minKilometer": min_kilometer, "maxKilometer": max_kilometer}, page, size)
