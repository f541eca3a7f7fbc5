"""
Normalized entity state for categories and the four listing categories.
"""

from typing import Any, Dict, Generic, List, Optional, TypeVar

from Vesta.core.client.models.wire import Page
from Vesta.core.client.utils.constants import DEFAULT_PAGE_SIZE
from Vesta.services.base import Body, ListingCategoryService, to_params
from Vesta.services.category_service import CategoryService

from .base import Slice

E = TypeVar("E")


class EntitySlice(Slice, Generic[E]):
    """
    Entities kept by id in server order, plus the last fetched page and the
    item currently shown.
    """

    label = "item"

    def __init__(self, service, toasts=None):
        super().__init__(toasts)
        self._service = service
        self.entities: Dict[int, E] = {}
        self.ids: List[int] = []
        self.page: Optional[Page[E]] = None
        self.current: Optional[E] = None

    @property
    def service(self):
        return self._service

    @property
    def items(self) -> List[E]:
        return [self.entities[entity_id] for entity_id in self.ids]

    def get(self, entity_id: int) -> Optional[E]:
        return self.entities.get(entity_id)

    def _set_all(self, items: List[E]) -> None:
        self.entities = {item.id: item for item in items}
        self.ids = [item.id for item in items]

    def _upsert(self, item: E, prepend: bool = False) -> None:
        if item.id not in self.entities:
            if prepend:
                self.ids.insert(0, item.id)
            else:
                self.ids.append(item.id)
        self.entities[item.id] = item

    def _drop(self, entity_id: int) -> None:
        self.entities.pop(entity_id, None)
        if entity_id in self.ids:
            self.ids.remove(entity_id)
        if self.current is not None and getattr(self.current, "id", None) == entity_id:
            self.current = None

    def set_current(self, item: Optional[E]) -> None:
        self.current = item
        self._changed()

    def clear_current(self) -> None:
        self.set_current(None)

    async def fetch_all(self) -> Optional[List[E]]:
        items = await self._run(self._service.get_all, f"Could not load {self.label}s")
        if items is not None:
            self._set_all(items)
            self._changed()
        return items

    async def fetch_page(self, page: int = 0, size: int = DEFAULT_PAGE_SIZE,
                         sort: Optional[str] = None) -> Optional[Page[E]]:
        result = await self._run(lambda: self._service.get_page(page, size, sort),
                                 f"Could not load {self.label}s")
        if result is not None:
            self.page = result
            for item in result.content:
                self._upsert(item)
            self._changed()
        return result

    async def fetch_by_id(self, entity_id: int) -> Optional[E]:
        item = await self._run(lambda: self._service.get_by_id(entity_id), f"Could not load {self.label}")
        if item is not None:
            self.current = item
            self._upsert(item)
            self._changed()
        return item

    async def create(self, request: Body) -> Optional[E]:
        item = await self._run(lambda: self._service.create(request), f"Could not create {self.label}")
        if item is not None:
            self._upsert(item, prepend=True)
            self._success(f"{self.label.capitalize()} created")
            self._changed()
        return item

    async def update(self, entity_id: int, request: Body) -> Optional[E]:
        item = await self._run(lambda: self._service.update(entity_id, request),
                               f"Could not update {self.label}")
        if item is not None:
            self._upsert(item)
            if self.current is not None and getattr(self.current, "id", None) == entity_id:
                self.current = item
            self._success(f"{self.label.capitalize()} updated")
            self._changed()
        return item

    async def delete(self, entity_id: int) -> bool:
        done = await self._run(self._deleted(entity_id), f"Could not delete {self.label}")
        if not done:
            return False
        self._drop(entity_id)
        self._success(f"{self.label.capitalize()} deleted")
        self._changed()
        return True

    def _deleted(self, entity_id: int):
        async def operation() -> bool:
            await self._service.delete(entity_id)
            return True
        return operation

    def snapshot(self) -> Dict[str, Any]:
        return {
            "items": self.items,
            "page": self.page,
            "current": self.current,
            "is_loading": self.is_loading,
            "error": self.error,
        }


class CategorySlice(EntitySlice):
    name = "categories"
    label = "category"

    def __init__(self, service: CategoryService, toasts=None):
        super().__init__(service, toasts)

    @property
    def active(self) -> List[Any]:
        return [category for category in self.items if category.active]


class ListingSlice(EntitySlice):
    """A listing category with search results and the filters that produced them."""

    label = "listing"

    def __init__(self, name: str, service: ListingCategoryService, toasts=None):
        super().__init__(service, toasts)
        self.name = name
        self.search_results: Optional[Page[Any]] = None
        self.filters: Dict[str, Any] = {}

    def set_filters(self, filters: Body) -> None:
        self.filters = to_params(filters)
        self._changed()

    def clear_filters(self) -> None:
        self.filters = {}
        self._changed()

    def clear_search_results(self) -> None:
        self.search_results = None
        self._changed()

    async def search(self, filters: Body = None, page: int = 0, size: int = DEFAULT_PAGE_SIZE,
                     sort: Optional[str] = None) -> Optional[Page[Any]]:
        """Search with the given filters, or the stored ones when none are given."""
        if filters is not None:
            self.filters = to_params(filters)
        criteria = dict(self.filters)
        result = await self._run(lambda: self._service.search(criteria, page, size, sort),
                                 "Search failed")
        if result is not None:
            self.search_results = result
            for item in result.content:
                self._upsert(item)
            self._changed()
        return result

    async def fetch_similar(self, listing_id: int) -> Optional[List[Any]]:
        return await self._run(lambda: self._service.get_similar(listing_id),
                               "Could not load similar listings")

    def snapshot(self) -> Dict[str, Any]:
        state = super().snapshot()
        state["search_results"] = self.search_results
        state["filters"] = dict(self.filters)
        return state
