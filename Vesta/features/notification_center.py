"""
Notification list and unread counter.

Three inputs feed the same state: the initial REST fetch, pushes on
/topic/notifications/{userId} and the user's mark-as-read actions. Marking
read is optimistic; a failed REST call is logged and not rolled back.
"""

from typing import Any, List, Optional

from pydantic import ValidationError as PayloadError

from Vesta.core.client.models.wire import Notification
from Vesta.core.client.utils.exceptions import ClientError
from Vesta.core.logging import get_logger
from Vesta.core.realtime import topics
from Vesta.core.realtime.websocket_service import Subscription, WebSocketService
from Vesta.services.notification_service import NotificationService

from .realtime_feed import TopicFeed

logger = get_logger(__name__)


class NotificationCenter(TopicFeed):
    """
    Client-side notification state.

    The list is ordered newest first: REST results, then pushes prepended in
    arrival order. The same notification arriving over REST and as a push
    is kept twice.
    """

    def __init__(self, service: NotificationService, realtime: Optional[WebSocketService] = None):
        super().__init__(realtime)
        self._service = service
        self._items: List[Notification] = []
        self._unread = 0

    @property
    def items(self) -> List[Notification]:
        return self._items.copy()

    @property
    def unread_count(self) -> int:
        return self._unread

    def get(self, notification_id: int) -> Optional[Notification]:
        for item in self._items:
            if item.id == notification_id:
                return item
        return None

    def subscribe(self, user_id: int) -> Optional[Subscription]:
        """Receive pushes for a user."""
        return self.attach(topics.notifications(user_id))

    async def load(self) -> List[Notification]:
        """Replace local state with the server's list. Failures keep the current state."""
        try:
            items = await self._service.get_all()
        except ClientError as e:
            logger.error("Error fetching notifications: %s", e)
            return self.items

        self._items = list(items)
        self._unread = sum(1 for item in self._items if not item.is_read)
        self._notify()
        return self.items

    def handle_push(self, payload: Any) -> None:
        try:
            notification = Notification.model_validate(payload)
        except PayloadError as e:
            logger.error("Dropping malformed notification payload: %s", e)
            return

        self._items.insert(0, notification)
        if not notification.is_read:
            self._unread += 1
        self._notify()

    async def mark_as_read(self, notification_id: int) -> bool:
        """
        Mark one notification read.

        The flag flips and the counter drops (never below zero) before the
        REST call, so repeated or concurrent calls decrement exactly once.

        Returns:
            bool: True if this call changed the local state
        """
        item = self.get(notification_id)
        if item is None or item.is_read:
            return False

        item.is_read = True
        self._unread = max(0, self._unread - 1)
        self._notify()

        try:
            await self._service.mark_as_read(notification_id)
        except ClientError as e:
            logger.warning("Marking notification %s read failed, keeping local state: %s",
                           notification_id, e)
        return True

    async def mark_all_as_read(self) -> None:
        """Mark everything read locally, then issue one PUT /notifications/read-all."""
        for item in self._items:
            item.is_read = True
        self._unread = 0
        self._notify()

        try:
            await self._service.mark_all_as_read()
        except ClientError as e:
            logger.warning("Marking all notifications read failed, keeping local state: %s", e)
