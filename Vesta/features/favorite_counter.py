"""
Live favorite counter for one listing.
"""

from typing import Any, Optional

from pydantic import ValidationError as PayloadError

from Vesta.core.client.models.wire import FavoriteCountUpdate
from Vesta.core.client.utils.exceptions import ClientError
from Vesta.core.logging import get_logger
from Vesta.core.realtime import topics
from Vesta.core.realtime.websocket_service import Subscription, WebSocketService
from Vesta.services.favorite_service import FavoriteService

from .realtime_feed import TopicFeed

logger = get_logger(__name__)


class FavoriteCounter(TopicFeed):
    """Follows /topic/listing/{id}/favoriteCount for a single listing."""

    def __init__(self, listing_id: int, realtime: Optional[WebSocketService] = None,
                 favorites: Optional[FavoriteService] = None):
        super().__init__(realtime)
        self.listing_id = listing_id
        self.count: Optional[int] = None
        self.is_favorite: Optional[bool] = None
        self._favorites = favorites

    def subscribe(self) -> Optional[Subscription]:
        return self.attach(topics.favorite_count(self.listing_id))

    def handle_push(self, payload: Any) -> None:
        try:
            update = FavoriteCountUpdate.model_validate(payload)
        except PayloadError as e:
            logger.error("Dropping malformed favorite count payload: %s", e)
            return
        if update.listing_id != self.listing_id:
            return
        self.count = update.favorite_count
        self._notify()

    async def toggle(self, listing_type: str) -> Optional[bool]:
        """Add or remove the listing from the user's favorites; the count follows by push."""
        if self._favorites is None:
            return None
        try:
            if self.is_favorite is None:
                self.is_favorite = await self._favorites.is_favorite(self.listing_id)
            if self.is_favorite:
                await self._favorites.remove(self.listing_id)
            else:
                await self._favorites.add(self.listing_id, listing_type)
        except ClientError as e:
            logger.warning("Toggling favorite for listing %s failed: %s", self.listing_id, e)
            return self.is_favorite
        self.is_favorite = not self.is_favorite
        self._notify()
        return self.is_favorite
