"""
Listing comparison selection.

Up to three listings of one category can be selected. The first selection
locks the category; listings of other categories are ignored until the
selection is empty again.
"""

from typing import Any, Dict, List, Optional

from Vesta.config import config
from Vesta.core.client.models.wire import ComparisonResult
from Vesta.services.comparison_service import ComparisonService

from .base import Slice

MAX_SELECTIONS = config.MAX_COMPARE_SELECTIONS


class ComparisonSlice(Slice):
    name = "comparison"

    def __init__(self, service: ComparisonService, toasts=None, max_selections: int = MAX_SELECTIONS):
        super().__init__(toasts)
        self._service = service
        self.selected: List[int] = []
        self.category: Optional[str] = None
        self.max_selections = max_selections
        self.result: Optional[ComparisonResult] = None

    @staticmethod
    def _category_key(category: Any) -> str:
        return str(getattr(category, "value", category))

    def is_selected(self, listing_id: int) -> bool:
        return listing_id in self.selected

    def can_add(self, category: Any) -> bool:
        if self.category is not None and self.category != self._category_key(category):
            return False
        return len(self.selected) < self.max_selections

    def add(self, listing_id: int, category: Any) -> bool:
        """Select a listing. Returns False when it was ignored."""
        key = self._category_key(category)
        if self.category is not None and self.category != key:
            return False
        if len(self.selected) >= self.max_selections:
            return False
        if listing_id in self.selected:
            return False

        self.category = key
        self.selected.append(listing_id)
        self._changed()
        return True

    def remove(self, listing_id: int) -> None:
        if listing_id not in self.selected:
            return
        self.selected.remove(listing_id)
        if not self.selected:
            self.category = None
            self.result = None
        self._changed()

    def toggle(self, listing_id: int, category: Any) -> bool:
        """Select or deselect a listing. Returns whether it is selected afterwards."""
        if listing_id in self.selected:
            self.remove(listing_id)
            return False
        return self.add(listing_id, category)

    def clear(self) -> None:
        self.selected = []
        self.category = None
        self.result = None
        self._changed()

    async def compare(self) -> Optional[ComparisonResult]:
        """Fetch the side-by-side table for the current selection."""
        if len(self.selected) < 2:
            self.error = "Select at least two listings to compare"
            self._changed()
            return None
        ids = list(self.selected)
        result = await self._run(lambda: self._service.compare(ids), "Comparison failed")
        if result is not None:
            self.result = result
            self._changed()
        return result

    def snapshot(self) -> Dict[str, Any]:
        return {
            "selected": list(self.selected),
            "category": self.category,
            "max_selections": self.max_selections,
            "result": self.result,
            "is_loading": self.is_loading,
            "error": self.error,
        }
