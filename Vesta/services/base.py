"""
Shared plumbing for REST service modules.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from Vesta.api.client import VestaAPIClient, build_page_params
from Vesta.core.client.models.wire import Page, VestaModel
from Vesta.core.client.utils.constants import DEFAULT_PAGE_SIZE
from Vesta.core.client.utils.exceptions import ResponseFormatError

M = TypeVar("M", bound=BaseModel)

Body = Union[VestaModel, Dict[str, Any], None]


def to_body(body: Body) -> Optional[Dict[str, Any]]:
    """Request body as a camelCase dict."""
    if body is None:
        return None
    if isinstance(body, VestaModel):
        return body.to_wire()
    return dict(body)


def to_params(filters: Body) -> Dict[str, Any]:
    """Filter object or dict as query parameters."""
    return to_body(filters) or {}


def _validate(model: Type[M], data: Any) -> M:
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ResponseFormatError(f"Unexpected {model.__name__} response: {e.error_count()} invalid field(s)",
                                  {"errors": e.errors(include_url=False)}) from e


def parse_one(model: Type[M], data: Any) -> M:
    return _validate(model, data)


def parse_list(model: Type[M], data: Any) -> List[M]:
    if data is not None and not isinstance(data, list):
        raise ResponseFormatError(f"Expected a list of {model.__name__}, got {type(data).__name__}")
    return [_validate(model, item) for item in (data or [])]


def parse_page(model: Type[M], data: Any) -> Page[M]:
    return _validate(Page[model], data or {})


def parse_count(data: Any, key: Optional[str] = None) -> int:
    """A bare number, or ``data[key]`` when the endpoint wraps it in an object."""
    value = data.get(key, 0) if key is not None and isinstance(data, dict) else data
    try:
        return int(value or 0)
    except (TypeError, ValueError) as e:
        raise ResponseFormatError(f"Expected a count, got {value!r}") from e


class BaseService:
    """A service bound to one API client."""

    def __init__(self, api: VestaAPIClient):
        self.api = api


class ListingCategoryService(BaseService, Generic[M]):
    """
    CRUD, paging, filtering and similar-listing lookup for one listing category.

    Subclasses set ``base_path``, ``model`` and ``listing_type``.
    """

    base_path: str = ""
    model: Type[M]
    listing_type: str = ""

    async def get_all(self) -> List[M]:
        return parse_list(self.model, await self.api.get(self.base_path))

    async def get_page(self, page: int = 0, size: int = DEFAULT_PAGE_SIZE,
                       sort: Optional[str] = None) -> Page[M]:
        data = await self.api.get(f"{self.base_path}/page", params=build_page_params(page, size, sort))
        return parse_page(self.model, data)

    async def search(self, filters: Body = None, page: int = 0, size: int = DEFAULT_PAGE_SIZE,
                     sort: Optional[str] = None) -> Page[M]:
        """Filtered search; None and empty filter values are not sent."""
        params = to_params(filters)
        params.update(build_page_params(page, size, sort))
        data = await self.api.get(f"{self.base_path}/search", params=params)
        return parse_page(self.model, data)

    async def get_by_id(self, listing_id: int) -> M:
        return parse_one(self.model, await self.api.get(f"{self.base_path}/{listing_id}"))

    async def create(self, request: Body) -> M:
        return parse_one(self.model, await self.api.post(self.base_path, to_body(request)))

    async def update(self, listing_id: int, request: Body) -> M:
        return parse_one(self.model, await self.api.put(f"{self.base_path}/{listing_id}", to_body(request)))

    async def delete(self, listing_id: int) -> Any:
        return await self.api.delete(f"{self.base_path}/{listing_id}")

    async def get_similar(self, listing_id: int) -> List[M]:
        return parse_list(self.model, await self.api.get(f"{self.base_path}/{listing_id}/similar"))

    async def get_by_city(self, city: str, page: int = 0, size: int = DEFAULT_PAGE_SIZE) -> Page[M]:
        return await self.search({"city": city}, page, size)

    async def get_by_price_range(self, min_price: float, max_price: float,
                                 page: int = 0, size: int = DEFAULT_PAGE_SIZE) -> Page[M]:
        return await self.search({"minPrice": min_price, "maxPrice": max_price}, page, size)
