"""Land listings (/lands)."""

from Vesta.core.client.models.wire import Land, ListingType

from .base import ListingCategoryService


class LandService(ListingCategoryService[Land]):
    base_path = "/lands"
    model = Land
    listing_type = ListingType.LAND.value
