"""
Client-side store aggregating every slice.
"""

from typing import Any, Callable, Dict, List, Optional

from Vesta.core.client.services.toast_service import ToastService
from Vesta.core.logging import get_logger
from Vesta.services import Services

from .auth_slice import AuthSlice
from .comparison_slice import ComparisonSlice
from .entity_slice import CategorySlice, ListingSlice

logger = get_logger(__name__)

StoreListener = Callable[[str], None]


class Store:
    """
    Holds the slices and notifies listeners with the name of the slice that
    changed.
    """

    def __init__(self, services: Services, toasts: Optional[ToastService] = None):
        self.services = services
        if toasts is None:
            toasts = services.api.error_handler.toasts
        self.toasts = toasts
        self._listeners: List[StoreListener] = []

        self.auth = AuthSlice(services.auth, toasts)
        self.categories = CategorySlice(services.categories, toasts)
        self.real_estates = ListingSlice("real_estates", services.real_estates, toasts)
        self.vehicles = ListingSlice("vehicles", services.vehicles, toasts)
        self.lands = ListingSlice("lands", services.lands, toasts)
        self.workplaces = ListingSlice("workplaces", services.workplaces, toasts)
        self.comparison = ComparisonSlice(services.comparison, toasts)

        for slice_ in self.slices.values():
            slice_.bind(self._notify)

        # A forced logout on 401 must also reset the in-memory session
        services.api.error_handler.add_session_expired_listener(self.auth.restore)

    @property
    def slices(self) -> Dict[str, Any]:
        return {
            "auth": self.auth,
            "categories": self.categories,
            "real_estates": self.real_estates,
            "vehicles": self.vehicles,
            "lands": self.lands,
            "workplaces": self.workplaces,
            "comparison": self.comparison,
        }

    def listing_slice(self, listing_type: Any) -> Optional[ListingSlice]:
        """Slice for a ListingType value such as "REAL_ESTATE"."""
        key = str(getattr(listing_type, "value", listing_type))
        for slice_ in (self.real_estates, self.vehicles, self.lands, self.workplaces):
            if slice_.service.listing_type == key:
                return slice_
        return None

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _notify(self, slice_name: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(slice_name)
            except Exception:
                logger.exception("Store listener failed")

    def get_state(self) -> Dict[str, Any]:
        return {name: slice_.snapshot() for name, slice_ in self.slices.items()}
