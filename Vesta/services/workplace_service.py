"""Workplace listings (/workplaces)."""

from Vesta.core.client.models.wire import ListingType, Workplace

from .base import ListingCategoryService


class WorkplaceService(ListingCategoryService[Workplace]):
    base_path = "/workplaces"
    model = Workplace
    listing_type = ListingType.WORKPLACE.value
